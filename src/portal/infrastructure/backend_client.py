#portal/infrastructure/backend_client.py

import httpx

from authentication.domain.exceptions import EntradaInvalida, CredencialesInvalidas, SesionInvalida
from informes.domain.entities import TipoRegistro
from informes.domain.exceptions import FuenteNoDisponible

RUTAS_REGISTROS = {
    TipoRegistro.GUIAS: "/records/pickups",
    TipoRegistro.FACTURAS: "/records/unpaid-invoices",
}


def _detalle(response: httpx.Response) -> str:
    try:
        cuerpo = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(cuerpo, dict):
        return str(cuerpo.get("detail") or cuerpo.get("error") or cuerpo)
    return str(cuerpo)


class ClienteBackend:
    """Cliente HTTP síncrono de la API backend (auth + registros)."""

    def __init__(self, base_url: str, timeout: float = 10.0, transport: httpx.BaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _request(self, method: str, path: str, token: str | None = None, **kwargs) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            with httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
                return client.request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            raise FuenteNoDisponible(f"Timeout llamando {self.base_url}{path}: {e}")
        except httpx.HTTPError as e:
            raise FuenteNoDisponible(f"Error de conexión con {self.base_url}{path}: {e}")

    @staticmethod
    def _json(response: httpx.Response, path: str):
        try:
            return response.json()
        except ValueError:
            raise FuenteNoDisponible(f"Respuesta no JSON desde {path}")

    def login(self, login: str, clave: str) -> dict:
        path = "/auth/login"
        response = self._request("POST", path, json={"login": login, "password": clave})
        if response.status_code == 401:
            raise CredencialesInvalidas(_detalle(response))
        if response.status_code == 400:
            raise EntradaInvalida(_detalle(response))
        if not response.is_success:
            raise FuenteNoDisponible(f"Error en el servicio {path}: HTTP {response.status_code} {_detalle(response)}")
        cuerpo = self._json(response, path)
        return cuerpo.get("data", cuerpo) if isinstance(cuerpo, dict) else cuerpo

    def me(self, token: str) -> dict:
        path = "/auth/me"
        response = self._request("GET", path, token=token)
        if response.status_code == 401:
            raise SesionInvalida(_detalle(response))
        if not response.is_success:
            raise FuenteNoDisponible(f"Error en el servicio {path}: HTTP {response.status_code}")
        cuerpo = self._json(response, path)
        return cuerpo.get("data", cuerpo) if isinstance(cuerpo, dict) else cuerpo

    def logout(self, token: str) -> None:
        response = self._request("POST", "/auth/logout", token=token)
        if not response.is_success:
            raise FuenteNoDisponible(f"Logout rechazado: HTTP {response.status_code}")

    def registros(self, tipo: TipoRegistro, cliente_id: int, params: dict, token: str):
        path = RUTAS_REGISTROS[tipo]
        query = {"tenantId": str(cliente_id), **params}
        response = self._request("GET", path, token=token, params=query)
        if not response.is_success:
            raise FuenteNoDisponible(f"Error en el servicio {path}: HTTP {response.status_code} {_detalle(response)}")
        return self._json(response, path)

    def health(self) -> dict:
        response = self._request("GET", "/health")
        if not response.is_success:
            raise FuenteNoDisponible(f"Health HTTP {response.status_code}")
        return self._json(response, "/health")
