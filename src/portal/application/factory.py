# portal/application/factory.py

import httpx

from informes.domain.entities import TipoRegistro
from portal.application.autenticador import Autenticador
from portal.application.resolvedor_datos import ResolvedorDatos
from portal.config import Settings
from portal.infrastructure.backend_client import ClienteBackend
from portal.infrastructure.cache import CacheRegistros
from portal.infrastructure.fuentes import FuenteJsonRemota, FuenteApiBackend, FuenteEmbebida


def construir_cliente_backend(settings: Settings, transport: httpx.BaseTransport | None = None) -> ClienteBackend:
    return ClienteBackend(settings.BACKEND_API_URL, settings.BACKEND_TIMEOUT_SEGUNDOS, transport=transport)


def construir_resolvedor(settings: Settings, transport: httpx.BaseTransport | None = None) -> ResolvedorDatos:
    cache = CacheRegistros(ttl_segundos=settings.CACHE_TTL_SEGUNDOS)
    rutas = {
        TipoRegistro.GUIAS: settings.EXTERNAL_GUIAS_PATH,
        TipoRegistro.FACTURAS: settings.EXTERNAL_FACTURAS_PATH,
    }
    fuentes = [
        FuenteJsonRemota(settings.EXTERNAL_JSON_BASE_URL, rutas, cache,
                         timeout=settings.EXTERNAL_TIMEOUT_SEGUNDOS, transport=transport),
        FuenteApiBackend(construir_cliente_backend(settings, transport), modo_demo=settings.MODO_DEMO),
        FuenteEmbebida(),
    ]
    return ResolvedorDatos(fuentes, cache)


def construir_autenticador(settings: Settings, transport: httpx.BaseTransport | None = None) -> Autenticador:
    return Autenticador(construir_cliente_backend(settings, transport), modo_demo=settings.MODO_DEMO)
