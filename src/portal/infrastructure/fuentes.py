# portal/infrastructure/fuentes.py
#
# Fuentes de registros en el orden en que el resolvedor las intenta. Todas
# devuelven filas crudas (dict) o lanzan FuenteNoDisponible.

import httpx

from informes.domain.entities import TipoRegistro
from informes.domain.exceptions import FuenteNoDisponible, RegistroInvalido
from informes.domain.normalizacion import desenvolver
from informes.infrastructure import datos_embebidos
from portal.infrastructure.backend_client import ClienteBackend
from portal.infrastructure.cache import CacheRegistros


class FuenteJsonRemota:
    """JSON estático publicado en un servidor web; trae el lote completo de todos los clientes."""

    nombre = "json_remoto"

    def __init__(self, base_url: str, rutas: dict, cache: CacheRegistros, timeout: float = 10.0,
                 transport: httpx.BaseTransport | None = None):
        self.base_url = (base_url or "").rstrip("/")
        self.rutas = rutas
        self.cache = cache
        self.timeout = timeout
        self.transport = transport

    @property
    def habilitada(self) -> bool:
        return bool(self.base_url)

    def url(self, tipo: TipoRegistro) -> str:
        return f"{self.base_url}{self.rutas[tipo]}"

    def obtener(self, tipo: TipoRegistro, cliente_id: int, filtros=None, token=None) -> list:
        if not self.habilitada:
            raise FuenteNoDisponible("JSON remoto no configurado")

        en_cache = self.cache.obtener(tipo)
        if en_cache is not None:
            return en_cache

        url = self.url(tipo)
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(url, headers={"Accept": "application/json", "Cache-Control": "no-cache"})
        except httpx.TimeoutException:
            raise FuenteNoDisponible(f"Timeout descargando {url}")
        except httpx.HTTPError as e:
            raise FuenteNoDisponible(f"Error de conexión con {url}: {e}")

        if not response.is_success:
            raise FuenteNoDisponible(f"HTTP {response.status_code} {response.reason_phrase} en {url}")

        try:
            filas = desenvolver(response.json())
        except ValueError as e:
            # incluye RegistroInvalido y JSON mal formado
            raise FuenteNoDisponible(f"Payload inválido en {url}: {e}")

        self.cache.guardar(tipo, filas)
        return list(filas)


class FuenteApiBackend:
    """API backend con base de datos; filtra en SQL por el cliente del token."""

    nombre = "api_backend"

    def __init__(self, cliente: ClienteBackend, modo_demo: bool = False):
        self.cliente = cliente
        self.modo_demo = modo_demo

    def obtener(self, tipo: TipoRegistro, cliente_id: int, filtros=None, token=None) -> list:
        if self.modo_demo:
            raise FuenteNoDisponible("Modo demo activo: backend omitido")
        if not token:
            raise FuenteNoDisponible("Sin token de sesión para el backend")

        params = filtros.como_query_params() if filtros is not None else {}
        payload = self.cliente.registros(tipo, cliente_id, params, token)
        try:
            return desenvolver(payload)
        except RegistroInvalido as e:
            raise FuenteNoDisponible(f"Respuesta inválida del backend: {e}")


class FuenteEmbebida:
    """Datos de muestra incluidos en la aplicación. Nunca falla."""

    nombre = "embebido"

    def __init__(self, guias=None, facturas=None):
        self._datos = {
            TipoRegistro.GUIAS: datos_embebidos.GUIAS if guias is None else guias,
            TipoRegistro.FACTURAS: datos_embebidos.FACTURAS_IMPAGAS if facturas is None else facturas,
        }

    def obtener(self, tipo: TipoRegistro, cliente_id: int, filtros=None, token=None) -> list:
        return [dict(fila) for fila in self._datos[tipo]]
