# tests/test_portal_api.py

import pytest
from fastapi.testclient import TestClient

from portal.api.dependencies import get_autenticador, get_resolvedor
from portal.api.main import app
from portal.application.autenticador import Autenticador
from portal.application.resolvedor_datos import ResolvedorDatos
from portal.infrastructure.fuentes import FuenteEmbebida


@pytest.fixture
def client(servicio_embebido):
    resolvedor = ResolvedorDatos([FuenteEmbebida()])
    autenticador = Autenticador(None, modo_demo=True, servicio_embebido=servicio_embebido)
    app.dependency_overrides[get_resolvedor] = lambda: resolvedor
    app.dependency_overrides[get_autenticador] = lambda: autenticador
    yield TestClient(app)
    app.dependency_overrides.clear()


def _login(client, usuario="copec_admin"):
    r = client.post("/portal/login", json={"login": usuario, "password": "demo123"})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['data']['token']}"}


def test_login_demo(client):
    r = client.post("/portal/login", json={"login": "copec_admin", "password": "demo123"})
    data = r.json()["data"]
    assert data["cliente"]["id"] == 57
    assert data["origen"] == "embebido"


def test_login_invalido(client):
    assert client.post("/portal/login", json={"login": "copec_admin", "password": "x"}).status_code == 401
    assert client.post("/portal/login", json={"login": "", "password": ""}).status_code == 400


def test_me(client):
    r = client.get("/portal/me", headers=_login(client, "petrobras_admin"))
    assert r.status_code == 200
    assert r.json()["data"]["cliente"]["nombre"] == "PETROBRAS"
    assert client.get("/portal/me").status_code == 401


@pytest.mark.parametrize("usuario,cliente_id,guias,facturas", [
    ("copec_admin", 57, 15, 7),
    ("shell_admin", 58, 2, 2),
    ("petrobras_admin", 59, 2, 1),
])
def test_cada_cliente_ve_solo_lo_suyo(client, usuario, cliente_id, guias, facturas):
    headers = _login(client, usuario)

    g = client.get("/portal/guias", headers=headers).json()
    f = client.get("/portal/facturas-impagas", headers=headers).json()

    assert g["total"] == guias and f["total"] == facturas
    assert {r["clienteId"] for r in g["data"] + f["data"]} == {cliente_id}
    assert g["fuente"] == "embebido"


def test_guias_sin_sesion(client):
    assert client.get("/portal/guias").status_code == 401


def test_filtros_en_query(client):
    headers = _login(client)
    r = client.get("/portal/guias", params={"sucursal": "LOS ANGELES"}, headers=headers)
    assert r.json()["total"] == 3

    r = client.get("/portal/facturas-impagas", params={"diasMoraMin": 40}, headers=headers)
    assert r.json()["total"] == 4


def test_filtro_fecha_invalida_es_400(client):
    r = client.get("/portal/guias", params={"fechaInicio": "07-2025"}, headers=_login(client))
    assert r.status_code == 400


def test_estadisticas(client):
    data = client.get("/portal/estadisticas", headers=_login(client, "shell_admin")).json()["data"]
    assert data["totalGuias"] == 2
    assert data["montoTotalImpago"] == 270000
    assert data["facturasVencidas"] == {"criticas": 0, "altas": 0, "medias": 1, "bajas": 1}


def test_valores_filtro(client):
    headers = _login(client, "shell_admin")
    r = client.get("/portal/filtros/guias", headers=headers)
    assert r.json()["data"]["frecuencias"] == ["SEMANAL"]
    assert client.get("/portal/filtros/clientes", headers=headers).status_code == 404


def test_exportar_excel(client):
    r = client.get("/portal/exportar/guias/xlsx", headers=_login(client))

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/vnd.openxmlformats")
    disposicion = r.headers["content-disposition"]
    assert disposicion.startswith('attachment; filename="Guias_Retiro_COPEC_')
    assert disposicion.endswith('.xlsx"')


def test_exportar_pdf_con_nombre_de_cliente(client):
    r = client.get(
        "/portal/exportar/facturas-impagas/pdf",
        params={"cliente": "COPEC S.A."},
        headers=_login(client),
    )
    assert r.status_code == 200
    assert r.content.startswith(b"%PDF")
    assert "Facturas_Impagas_COPEC_S.A._" in r.headers["content-disposition"]


def test_exportar_sin_resultados_es_400(client):
    r = client.get("/portal/exportar/guias/xlsx", params={"sucursal": "no existe"}, headers=_login(client))
    assert r.status_code == 400
    assert r.json()["detail"] == "No hay datos para exportar"


def test_exportar_formato_desconocido(client):
    assert client.get("/portal/exportar/guias/csv", headers=_login(client)).status_code == 400


def test_conexion_y_cache(client):
    headers = _login(client)
    client.get("/portal/guias", headers=headers)

    info = client.get("/portal/conexion", headers=headers).json()["data"]
    assert info["modo"] == "disabled"
    assert info["ultimaFuente"] == "embebido"

    assert client.post("/portal/cache/invalidar", params={"tipo": "guias"}, headers=headers).status_code == 200
    assert client.post("/portal/cache/invalidar", headers=headers).status_code == 200


def test_logout(client):
    assert client.post("/portal/logout", headers=_login(client)).status_code == 200


def test_health():
    r = TestClient(app).get("/health")
    assert r.status_code == 200
    assert r.json()["service"] == "portal"
