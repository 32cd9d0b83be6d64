# tests/test_main_portal.py

import json

import pytest

from authentication.infrastructure.token_service import generar_token
from portal.config import Settings
from portal.infrastructure.session_store import AlmacenSesion, CLAVE_TOKEN, CLAVE_USUARIO
from portal.main_portal import main


@pytest.fixture
def settings(tmp_path):
    return Settings(
        MODO_DEMO=True,
        EXTERNAL_JSON_BASE_URL="",
        SESSION_FILE=str(tmp_path / "sesion" / "session.json"),
    )


def _login(settings, usuario="copec_admin"):
    assert main(["login", "--usuario", usuario, "--clave", "demo123"], settings=settings) == 0


def test_login_guarda_sesion(settings, capsys):
    _login(settings)

    with open(settings.SESSION_FILE, encoding="utf-8") as f:
        guardado = json.load(f)
    assert guardado[CLAVE_USUARIO] == 1
    assert guardado[CLAVE_TOKEN]
    assert "COPEC" in capsys.readouterr().out


def test_login_fallido(settings, capsys):
    assert main(["login", "--usuario", "copec_admin", "--clave", "mala"], settings=settings) == 1
    assert AlmacenSesion(settings.SESSION_FILE).cargar() is None
    assert "❌" in capsys.readouterr().out


def test_comandos_sin_sesion(settings, capsys):
    assert main(["guias"], settings=settings) == 1
    assert "No hay sesión iniciada" in capsys.readouterr().out


def test_listar_guias_filtradas(settings, capsys):
    _login(settings)
    capsys.readouterr()

    assert main(["guias", "--sucursal", "los angeles"], settings=settings) == 0
    salida = capsys.readouterr().out
    assert "COPEC LOS ANGELES NORTE" in salida
    assert "Total: 3" in salida
    assert "SHELL" not in salida


def test_listar_facturas_de_otro_cliente(settings, capsys):
    _login(settings, "petrobras_admin")
    capsys.readouterr()

    assert main(["facturas"], settings=settings) == 0
    salida = capsys.readouterr().out
    assert "PETROBRAS VITACURA" in salida
    assert "Total: 1" in salida


def test_filtro_invalido(settings, capsys):
    _login(settings)
    assert main(["guias", "--fecha-inicio", "ayer"], settings=settings) == 1


def test_estadisticas_y_conexion(settings, capsys):
    _login(settings, "shell_admin")
    capsys.readouterr()

    assert main(["estadisticas"], settings=settings) == 0
    assert "Guías: 2" in capsys.readouterr().out

    assert main(["--refrescar", "conexion"], settings=settings) == 0
    assert "modo: disabled" in capsys.readouterr().out


def test_exportar_excel(settings, tmp_path, capsys):
    _login(settings)
    destino = tmp_path / "exportes"

    assert main(["exportar", "guias", "xlsx", "--salida", str(destino)], settings=settings) == 0

    archivos = list(destino.iterdir())
    assert len(archivos) == 1
    assert archivos[0].name.startswith("Guias_Retiro_COPEC_")
    assert archivos[0].suffix == ".xlsx"


def test_exportar_sin_datos(settings, tmp_path, capsys):
    _login(settings)
    capsys.readouterr()
    args = ["exportar", "facturas", "pdf", "--salida", str(tmp_path), "--dias-mora-min", "500"]

    assert main(args, settings=settings) == 1
    assert "No hay datos para exportar" in capsys.readouterr().out


def test_me_y_logout(settings, capsys):
    _login(settings)
    capsys.readouterr()

    assert main(["me"], settings=settings) == 0
    assert "copec_admin" in capsys.readouterr().out

    assert main(["logout"], settings=settings) == 0
    assert AlmacenSesion(settings.SESSION_FILE).cargar() is None


def test_token_expirado_limpia_sesion(settings, capsys):
    AlmacenSesion(settings.SESSION_FILE).guardar(generar_token(1, 57, None, expiracion_minutos=-1), 1)

    assert main(["guias"], settings=settings) == 1
    assert "Sesión inválida" in capsys.readouterr().out
    assert AlmacenSesion(settings.SESSION_FILE).cargar() is None


def test_archivo_de_sesion_corrupto(settings):
    almacen = AlmacenSesion(settings.SESSION_FILE)
    almacen.guardar("x", 1)
    with open(settings.SESSION_FILE, "w", encoding="utf-8") as f:
        f.write("{no es json")

    assert almacen.cargar() is None
    assert main(["facturas"], settings=settings) == 1


def test_sin_comando(settings):
    assert main([], settings=settings) == 1
