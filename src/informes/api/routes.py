# informes/api/routes.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, HTTPException

from authentication.domain.entities import UsuarioToken
from authentication.domain.exceptions import EntradaInvalida
from authentication.infrastructure.database_connection import conectar_base, cerrar_conexion
from authentication.utils.dependencies import get_current_user
from informes.domain.aislamiento import verificar_aislamiento
from informes.domain.entities import TipoRegistro
from informes.domain.estadisticas_service import calcular_estadisticas
from informes.domain.exceptions import ViolacionSeguridad
from informes.domain.filtros import FiltrosGuias, FiltrosFacturas
from informes.domain.normalizacion import normalizar, ordenar
from informes.infrastructure.database_reader import RegistrosReader
from utils.logging_factory import get_logger

router = APIRouter(
    prefix="/records",
    tags=["Informes"]
)

logger = get_logger("informes")


def obtener_reader():
    conn = conectar_base()
    if conn is None:
        raise HTTPException(status_code=503, detail="Base de datos no disponible")
    try:
        yield RegistrosReader(conn)
    finally:
        cerrar_conexion(conn)


def _cliente_de_sesion(usuario: UsuarioToken, tenant_id: Optional[int]) -> int:
    if tenant_id is not None and tenant_id != usuario.cliente_id:
        logger.warning(
            f"🚨 Usuario {usuario.id} (cliente {usuario.cliente_id}) pidió datos del cliente {tenant_id}"
        )
        raise HTTPException(status_code=403, detail="No tiene acceso a los datos de otro cliente")
    return usuario.cliente_id


def _construir_filtros(clase, **kwargs):
    try:
        return clase(**kwargs)
    except EntradaInvalida as e:
        raise HTTPException(status_code=400, detail=str(e))


def _preparar(tipo: TipoRegistro, filas: list, filtros, cliente_id: int) -> list:
    registros = ordenar(tipo, filtros.aplicar(normalizar(tipo, filas)))
    try:
        return verificar_aislamiento(registros, cliente_id)
    except ViolacionSeguridad as e:
        raise HTTPException(status_code=403, detail=f"Alerta de seguridad: {e}")


@router.get("/pickups", summary="Guías de retiro del cliente autenticado")
def listar_guias(
    tenant_id: Optional[int] = Query(None, alias="tenantId", description="Debe coincidir con el cliente del token"),
    fecha_inicio: Optional[date] = Query(None, alias="fechaInicio", description="AAAA-MM-DD"),
    fecha_fin: Optional[date] = Query(None, alias="fechaFin", description="AAAA-MM-DD"),
    servicio: Optional[str] = Query(None),
    frecuencia: Optional[str] = Query(None),
    sucursal: Optional[str] = Query(None),
    usuario: UsuarioToken = Depends(get_current_user),
    reader: RegistrosReader = Depends(obtener_reader),
):
    cliente_id = _cliente_de_sesion(usuario, tenant_id)
    filtros = _construir_filtros(
        FiltrosGuias,
        fecha_inicio=fecha_inicio, fecha_fin=fecha_fin,
        servicio=servicio, frecuencia=frecuencia, sucursal=sucursal,
    )
    filas = reader.listar_guias(cliente_id, filtros.fecha_inicio, filtros.fecha_fin)
    guias = _preparar(TipoRegistro.GUIAS, filas, filtros, cliente_id)
    return {"success": True, "data": [g.to_dict() for g in guias], "total": len(guias)}


@router.get("/unpaid-invoices", summary="Facturas impagas del cliente autenticado")
def listar_facturas_impagas(
    tenant_id: Optional[int] = Query(None, alias="tenantId", description="Debe coincidir con el cliente del token"),
    fecha_inicio: Optional[date] = Query(None, alias="fechaInicio"),
    fecha_fin: Optional[date] = Query(None, alias="fechaFin"),
    sucursal: Optional[str] = Query(None),
    estado_mora: Optional[str] = Query(None, alias="estadoMora"),
    dias_mora_min: Optional[int] = Query(None, alias="diasMoraMin"),
    dias_mora_max: Optional[int] = Query(None, alias="diasMoraMax"),
    usuario: UsuarioToken = Depends(get_current_user),
    reader: RegistrosReader = Depends(obtener_reader),
):
    cliente_id = _cliente_de_sesion(usuario, tenant_id)
    filtros = _construir_filtros(
        FiltrosFacturas,
        fecha_inicio=fecha_inicio, fecha_fin=fecha_fin, sucursal=sucursal,
        estado_mora=estado_mora, dias_mora_min=dias_mora_min, dias_mora_max=dias_mora_max,
    )
    filas = reader.listar_facturas(cliente_id, filtros.fecha_inicio, filtros.fecha_fin)
    facturas = _preparar(TipoRegistro.FACTURAS, filas, filtros, cliente_id)
    return {"success": True, "data": [f.to_dict() for f in facturas], "total": len(facturas)}


@router.get("/stats", summary="Estadísticas del cliente autenticado")
def estadisticas(
    usuario: UsuarioToken = Depends(get_current_user),
    reader: RegistrosReader = Depends(obtener_reader),
):
    cliente_id = usuario.cliente_id
    guias = _preparar(TipoRegistro.GUIAS, reader.listar_guias(cliente_id), FiltrosGuias(), cliente_id)
    facturas = _preparar(TipoRegistro.FACTURAS, reader.listar_facturas(cliente_id), FiltrosFacturas(), cliente_id)

    stats = calcular_estadisticas(guias, facturas)
    logger.info(
        f"📊 Estadísticas cliente {cliente_id}: {stats['totalGuias']} guías, "
        f"{stats['totalFacturasImpagas']} facturas impagas"
    )
    return {"success": True, "data": stats}
