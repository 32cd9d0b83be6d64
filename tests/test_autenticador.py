# tests/test_autenticador.py

import httpx
import pytest

from authentication.domain.exceptions import CredencialesInvalidas, EntradaInvalida, SesionInvalida
from authentication.infrastructure.token_service import generar_token
from portal.application.autenticador import Autenticador, EstadoSesion, SesionPortal
from portal.infrastructure.backend_client import ClienteBackend


def _backend(handler, llamadas=None):
    def registrar(request):
        if llamadas is not None:
            llamadas.append(request)
        return handler(request)
    return ClienteBackend("http://api.test", transport=httpx.MockTransport(registrar))


def _login_ok(request):
    token = generar_token(21, 58, "Usuario backend", "remoto")
    return httpx.Response(200, json={
        "success": True,
        "data": {"usuario": {"id": 21, "usu_login": "remoto"}, "cliente": {"id": 58}, "token": token},
    })


def test_login_via_backend(servicio_embebido):
    llamadas = []
    auth = Autenticador(_backend(_login_ok, llamadas), servicio_embebido=servicio_embebido)

    resultado = auth.login("remoto", "secreta")

    assert resultado["origen"] == "backend"
    assert resultado["cliente"]["id"] == 58
    assert llamadas[0].url.path == "/auth/login"


def test_backend_401_no_usa_respaldo(servicio_embebido):
    backend = _backend(lambda r: httpx.Response(401, json={"detail": "Usuario o contraseña incorrectos"}))
    auth = Autenticador(backend, servicio_embebido=servicio_embebido)

    # copec_admin/demo123 existe en los datos embebidos, pero el backend respondió
    with pytest.raises(CredencialesInvalidas):
        auth.login("copec_admin", "demo123")


def test_backend_400_es_entrada_invalida(servicio_embebido):
    backend = _backend(lambda r: httpx.Response(400, json={"detail": "Faltan datos"}))
    with pytest.raises(EntradaInvalida):
        Autenticador(backend, servicio_embebido=servicio_embebido).login("x", "y")


def _sin_red(request):
    raise httpx.ConnectError("rechazada", request=request)


@pytest.mark.parametrize("handler", [
    lambda r: httpx.Response(503, json={"detail": "Base de datos no disponible"}),
    _sin_red,
])
def test_backend_caido_usa_embebido(servicio_embebido, handler):
    auth = Autenticador(_backend(handler), servicio_embebido=servicio_embebido)

    resultado = auth.login("copec_admin", "demo123")

    assert resultado["origen"] == "embebido"
    assert auth.verificar(resultado["token"]).cliente_id == 57


def test_modo_demo_no_llama_al_backend(servicio_embebido):
    llamadas = []
    auth = Autenticador(_backend(_login_ok, llamadas), modo_demo=True, servicio_embebido=servicio_embebido)

    resultado = auth.login("petrobras_admin", "demo123")

    assert resultado["origen"] == "embebido"
    assert resultado["cliente"]["id"] == 59
    assert llamadas == []


def test_login_vacio_no_consulta_nada(servicio_embebido):
    llamadas = []
    auth = Autenticador(_backend(_login_ok, llamadas), servicio_embebido=servicio_embebido)
    with pytest.raises(EntradaInvalida):
        auth.login("  ", "demo123")
    assert llamadas == []


def test_sesion_sin_backend(servicio_embebido, token_shell):
    auth = Autenticador(None, servicio_embebido=servicio_embebido)
    datos = auth.sesion(token_shell)
    assert datos["cliente"]["nombre"] == "SHELL"


def test_sesion_usuario_desconocido_usa_datos_del_token(servicio_embebido):
    auth = Autenticador(None, servicio_embebido=servicio_embebido)
    token = generar_token(77, 58, "Externo", "externo")

    datos = auth.sesion(token)

    assert datos["cliente"] == {"id": 58}
    assert datos["usuario"]["usu_login"] == "externo"


@pytest.mark.parametrize("token", [
    generar_token(1, 100, "Usuario Backend", "acme_admin"),
    generar_token(1, 100, "Usuario Backend"),
    generar_token(1, 57, "Otro", "acme_admin"),
])
def test_sesion_no_toma_datos_embebidos_de_otro_usuario(servicio_embebido, token):
    auth = Autenticador(None, modo_demo=True, servicio_embebido=servicio_embebido)
    usuario = auth.verificar(token)

    datos = auth.sesion(token)

    assert datos["cliente"] == {"id": usuario.cliente_id}
    assert datos["usuario"]["id"] == 1
    assert datos["usuario"]["usu_login"] != "copec_admin"


def test_sesion_token_invalido(servicio_embebido):
    with pytest.raises(SesionInvalida):
        Autenticador(None, servicio_embebido=servicio_embebido).sesion("basura")


def test_transiciones_de_sesion(servicio_embebido):
    sesion = SesionPortal(Autenticador(None, modo_demo=True, servicio_embebido=servicio_embebido))
    assert sesion.estado == EstadoSesion.ANONIMO
    with pytest.raises(SesionInvalida):
        sesion.verificar()

    sesion.iniciar("copec_admin", "demo123")
    assert sesion.autenticada
    assert sesion.cliente_id == 57
    assert sesion.origen == "embebido"

    sesion.cerrar()
    assert sesion.estado == EstadoSesion.ANONIMO
    assert sesion.token is None


def test_login_fallido_deja_sesion_anonima(servicio_embebido):
    sesion = SesionPortal(Autenticador(None, modo_demo=True, servicio_embebido=servicio_embebido))
    with pytest.raises(CredencialesInvalidas):
        sesion.iniciar("copec_admin", "mala")
    assert not sesion.autenticada


def test_restaurar_token_expirado_vuelve_a_anonimo(servicio_embebido):
    sesion = SesionPortal(Autenticador(None, servicio_embebido=servicio_embebido))
    sesion.restaurar(generar_token(1, 57, None))
    assert sesion.autenticada

    with pytest.raises(SesionInvalida):
        sesion.restaurar(generar_token(1, 57, None, expiracion_minutos=-5))
    assert sesion.estado == EstadoSesion.ANONIMO
    assert sesion.usuario is None
