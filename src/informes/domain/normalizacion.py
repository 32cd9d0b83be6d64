# informes/domain/normalizacion.py

from pydantic import ValidationError

from informes.domain.entities import MODELOS, TipoRegistro
from informes.domain.exceptions import RegistroInvalido
from utils.logging_factory import get_logger

logger = get_logger("normalizacion")


def desenvolver(payload):
    """Acepta una lista de registros o el sobre {"success": ..., "data": [...]} del backend."""
    if isinstance(payload, dict) and "data" in payload:
        payload = payload["data"]
    if not isinstance(payload, list):
        raise RegistroInvalido(f"Se esperaba una lista de registros, se recibió {type(payload).__name__}")
    return payload


def normalizar(tipo: TipoRegistro, payload) -> list:
    """
    Convierte filas crudas (dict) en Guia / FacturaImpaga. Las filas que no
    validan se descartan con un warning; el resto del lote se conserva.
    """
    modelo = MODELOS[tipo]
    filas = desenvolver(payload)

    registros = []
    descartadas = 0
    for fila in filas:
        if isinstance(fila, modelo):
            registros.append(fila)
            continue
        if not isinstance(fila, dict):
            descartadas += 1
            continue
        try:
            registros.append(modelo.model_validate(fila))
        except ValidationError as e:
            descartadas += 1
            logger.debug(f"Fila descartada ({tipo.value}): {e.errors()[:1]}")

    if descartadas:
        logger.warning(f"⚠️ {descartadas} fila(s) de {tipo.value} descartadas por formato inválido")
    return registros


def ordenar(tipo: TipoRegistro, registros: list) -> list:
    """Guías: fecha desc, id desc. Facturas: dias_mora desc, fecha_factura asc."""
    if tipo == TipoRegistro.GUIAS:
        return sorted(registros, key=lambda g: (g.fecha, g.id), reverse=True)
    ordenados = sorted(registros, key=lambda f: f.fecha_factura or f.fecha)
    return sorted(ordenados, key=lambda f: f.dias_mora, reverse=True)
