# portal/application/resolvedor_datos.py

from typing import Optional

from authentication.domain.exceptions import EntradaInvalida
from informes.domain.aislamiento import filtrar_por_cliente, verificar_aislamiento
from informes.domain.entities import TipoRegistro
from informes.domain.exceptions import ClienteInvalido, FuenteNoDisponible
from informes.domain.filtros import FiltrosGuias, FiltrosFacturas
from informes.domain.normalizacion import normalizar, ordenar
from portal.infrastructure.cache import CacheRegistros
from portal.infrastructure.fuentes import FuenteJsonRemota
from utils.logging_factory import get_logger

logger = get_logger("resolvedor_datos")

FILTROS_POR_TIPO = {
    TipoRegistro.GUIAS: FiltrosGuias,
    TipoRegistro.FACTURAS: FiltrosFacturas,
}


def validar_cliente_id(cliente_id) -> int:
    if isinstance(cliente_id, bool) or not isinstance(cliente_id, int) or cliente_id <= 0:
        raise ClienteInvalido(f"ID de cliente inválido: {cliente_id!r}")
    return cliente_id


def validar_tipo(tipo) -> TipoRegistro:
    try:
        return TipoRegistro(tipo)
    except ValueError:
        raise EntradaInvalida(f"Tipo de registro desconocido: {tipo!r}")


class ResolvedorDatos:
    """
    Entrega los registros de un cliente recorriendo las fuentes en orden
    (JSON remoto -> API backend -> datos embebidos) y quedándose con la
    primera que responde.

    Sobre el lote obtenido, cualquiera sea su origen: normaliza, filtra por
    cliente, aplica los filtros pedidos, ordena y verifica que no haya quedado
    ningún registro ajeno. Las fallas de fuentes se registran y no se propagan;
    sólo un cliente inválido o una fuga entre clientes llegan al llamador.
    """

    def __init__(self, fuentes: list, cache: Optional[CacheRegistros] = None):
        if not fuentes:
            raise ValueError("Se requiere al menos una fuente de datos")
        self.fuentes = list(fuentes)
        self.cache = cache or CacheRegistros()
        self.ultima_fuente: Optional[str] = None
        self.estado_fuentes: dict = {}

    def _filtros(self, tipo: TipoRegistro, filtros):
        esperado = FILTROS_POR_TIPO[tipo]
        if filtros is None:
            return esperado()
        if not isinstance(filtros, esperado):
            raise EntradaInvalida(f"Filtros {type(filtros).__name__} no corresponden a {tipo.value}")
        return filtros

    def _obtener_filas(self, tipo: TipoRegistro, cliente_id: int, filtros, token):
        for fuente in self.fuentes:
            try:
                filas = fuente.obtener(tipo, cliente_id, filtros, token)
            except FuenteNoDisponible as e:
                self.estado_fuentes[fuente.nombre] = False
                logger.warning(f"⚠️ Fuente {fuente.nombre} no disponible para {tipo.value}: {e}")
                continue
            self.estado_fuentes[fuente.nombre] = True
            return fuente, filas
        raise FuenteNoDisponible(f"Ninguna fuente de datos disponible para {tipo.value}")

    def resolver(self, cliente_id, tipo, filtros=None, token: Optional[str] = None) -> list:
        cliente_id = validar_cliente_id(cliente_id)
        tipo = validar_tipo(tipo)
        filtros = self._filtros(tipo, filtros)

        fuente, filas = self._obtener_filas(tipo, cliente_id, filtros, token)
        self.ultima_fuente = fuente.nombre

        registros = filtrar_por_cliente(normalizar(tipo, filas), cliente_id)
        registros = ordenar(tipo, filtros.aplicar(registros))
        verificar_aislamiento(registros, cliente_id)

        logger.info(f"✅ {len(registros)} {tipo.value} para cliente {cliente_id} (fuente: {fuente.nombre})")
        return registros

    def invalidar_cache(self, tipo=None) -> None:
        self.cache.invalidar(validar_tipo(tipo) if tipo is not None else None)

    def info_conexion(self) -> dict:
        json_remota = next((f for f in self.fuentes if isinstance(f, FuenteJsonRemota)), None)
        habilitada = json_remota is not None and json_remota.habilitada
        disponible = self.estado_fuentes.get(FuenteJsonRemota.nombre) if habilitada else None

        if not habilitada:
            modo = "disabled"
        elif disponible is False:
            modo = "fallback"
        else:
            modo = "external"

        deshabilitada = "Deshabilitado (URL base vacía)"
        return {
            "modo": modo,
            "habilitado": habilitada,
            "guiasUrl": json_remota.url(TipoRegistro.GUIAS) if habilitada else deshabilitada,
            "facturasUrl": json_remota.url(TipoRegistro.FACTURAS) if habilitada else deshabilitada,
            "externoDisponible": disponible,
            "cacheValido": self.cache.estado(),
            "ultimaFuente": self.ultima_fuente,
            "fuentes": [f.nombre for f in self.fuentes],
        }

    @staticmethod
    def valores_filtro(tipo, registros: list) -> dict:
        """Valores distintos (no vacíos, ordenados) para poblar los selectores de filtro."""
        tipo = validar_tipo(tipo)
        if tipo == TipoRegistro.GUIAS:
            campos = {"servicios": "servicio", "frecuencias": "frecuencia", "sucursales": "sucursal"}
        else:
            campos = {"sucursales": "sucursal", "estadosMora": "estado_mora"}

        valores = {}
        for clave, campo in campos.items():
            distintos = {(getattr(r, campo) or "").strip() for r in registros}
            valores[clave] = sorted(v for v in distintos if v)
        return valores
