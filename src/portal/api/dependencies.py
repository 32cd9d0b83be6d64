# portal/api/dependencies.py

from functools import lru_cache
from typing import Optional

from fastapi import HTTPException, Query

from authentication.domain.exceptions import EntradaInvalida
from informes.domain.entities import TipoRegistro
from informes.domain.filtros import FiltrosGuias, FiltrosFacturas
from portal.application.autenticador import Autenticador
from portal.application.factory import construir_autenticador, construir_resolvedor
from portal.application.resolvedor_datos import ResolvedorDatos
from portal.config import settings
from portal.visualization.export_service import ExportService


@lru_cache
def get_resolvedor() -> ResolvedorDatos:
    # una instancia por proceso: el cache de registros vive aquí
    return construir_resolvedor(settings)


@lru_cache
def get_autenticador() -> Autenticador:
    return construir_autenticador(settings)


def get_export_service() -> ExportService:
    return ExportService()


def parametros_filtro(
    fecha_inicio: Optional[str] = Query(None, alias="fechaInicio", description="AAAA-MM-DD"),
    fecha_fin: Optional[str] = Query(None, alias="fechaFin", description="AAAA-MM-DD"),
    servicio: Optional[str] = Query(None),
    frecuencia: Optional[str] = Query(None),
    sucursal: Optional[str] = Query(None),
    estado_mora: Optional[str] = Query(None, alias="estadoMora"),
    dias_mora_min: Optional[int] = Query(None, alias="diasMoraMin"),
    dias_mora_max: Optional[int] = Query(None, alias="diasMoraMax"),
) -> dict:
    return {
        "fecha_inicio": fecha_inicio,
        "fecha_fin": fecha_fin,
        "servicio": servicio,
        "frecuencia": frecuencia,
        "sucursal": sucursal,
        "estado_mora": estado_mora,
        "dias_mora_min": dias_mora_min,
        "dias_mora_max": dias_mora_max,
    }


def construir_filtros(tipo: TipoRegistro, params: dict):
    """Toma de los parámetros sólo los que aplican al tipo pedido."""
    try:
        if tipo == TipoRegistro.GUIAS:
            return FiltrosGuias(
                fecha_inicio=params.get("fecha_inicio"), fecha_fin=params.get("fecha_fin"),
                servicio=params.get("servicio"), frecuencia=params.get("frecuencia"),
                sucursal=params.get("sucursal"),
            )
        return FiltrosFacturas(
            fecha_inicio=params.get("fecha_inicio"), fecha_fin=params.get("fecha_fin"),
            sucursal=params.get("sucursal"), estado_mora=params.get("estado_mora"),
            dias_mora_min=params.get("dias_mora_min"), dias_mora_max=params.get("dias_mora_max"),
        )
    except EntradaInvalida as e:
        raise HTTPException(status_code=400, detail=str(e))
