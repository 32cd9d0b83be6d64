# portal/api/routes.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from fastapi.responses import Response

from authentication.api.routes import LoginRequest
from authentication.domain.entities import UsuarioToken
from authentication.domain.exceptions import (
    EntradaInvalida,
    CredencialesInvalidas,
    ClienteNoEncontrado,
    SesionInvalida,
)
from authentication.utils.dependencies import get_current_user, obtener_token
from informes.domain.entities import TipoRegistro
from informes.domain.estadisticas_service import calcular_estadisticas
from informes.domain.exceptions import FuenteNoDisponible, ViolacionSeguridad
from portal.api.dependencies import (
    construir_filtros,
    get_autenticador,
    get_export_service,
    get_resolvedor,
    parametros_filtro,
)
from portal.application.autenticador import Autenticador
from portal.application.resolvedor_datos import ResolvedorDatos
from portal.domain.exceptions import ErrorExportacion
from portal.visualization.export_service import ExportService
from utils.logging_factory import get_logger

router = APIRouter(prefix="/portal", tags=["Portal"])
logger = get_logger("portal")

TIPOS_RUTA = {
    "guias": TipoRegistro.GUIAS,
    "facturas": TipoRegistro.FACTURAS,
    "facturas-impagas": TipoRegistro.FACTURAS,
}


def _http(e: Exception) -> HTTPException:
    if isinstance(e, HTTPException):
        return e
    if isinstance(e, EntradaInvalida):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, (CredencialesInvalidas, SesionInvalida)):
        return HTTPException(status_code=401, detail=str(e), headers={"WWW-Authenticate": "Bearer"})
    if isinstance(e, ViolacionSeguridad):
        return HTTPException(status_code=403, detail=f"🚨 Alerta de seguridad: {e}")
    if isinstance(e, FuenteNoDisponible):
        return HTTPException(status_code=503, detail=str(e))
    if isinstance(e, (ClienteNoEncontrado, ErrorExportacion)):
        return HTTPException(status_code=500, detail=str(e))
    logger.error(f"❌ Error inesperado en portal: {e}")
    return HTTPException(status_code=500, detail=f"Error inesperado: {str(e) or 'sin detalles'}")


def _tipo(valor: str) -> TipoRegistro:
    tipo = TIPOS_RUTA.get(valor)
    if tipo is None:
        raise HTTPException(status_code=404, detail=f"Tipo de registro desconocido: {valor}")
    return tipo


def _resolver(resolvedor: ResolvedorDatos, usuario: UsuarioToken, tipo: TipoRegistro, filtros, token):
    try:
        return resolvedor.resolver(usuario.cliente_id, tipo, filtros, token=token)
    except Exception as e:
        raise _http(e)


# --------
# Sesión
# --------
@router.post("/login", summary="Iniciar sesión en el portal")
def login(request: LoginRequest, autenticador: Autenticador = Depends(get_autenticador)):
    try:
        data = autenticador.login(request.login, request.password)
    except Exception as e:
        raise _http(e)
    return {"success": True, "data": data}


@router.get("/me", summary="Usuario y cliente de la sesión")
def me(token: Optional[str] = Depends(obtener_token),
       autenticador: Autenticador = Depends(get_autenticador)):
    try:
        data = autenticador.sesion(token)
    except Exception as e:
        raise _http(e)
    return {"success": True, "data": data}


@router.post("/logout", summary="Cerrar sesión")
def logout(usuario: UsuarioToken = Depends(get_current_user),
           token: Optional[str] = Depends(obtener_token),
           autenticador: Autenticador = Depends(get_autenticador)):
    autenticador.logout(token)
    return {"success": True, "message": "Sesión cerrada correctamente"}


# --------
# Registros
# --------
@router.get("/guias", summary="Guías de retiro del cliente")
def listar_guias(params: dict = Depends(parametros_filtro),
                 usuario: UsuarioToken = Depends(get_current_user),
                 token: Optional[str] = Depends(obtener_token),
                 resolvedor: ResolvedorDatos = Depends(get_resolvedor)):
    filtros = construir_filtros(TipoRegistro.GUIAS, params)
    guias = _resolver(resolvedor, usuario, TipoRegistro.GUIAS, filtros, token)
    return {
        "success": True,
        "data": [g.to_dict() for g in guias],
        "total": len(guias),
        "fuente": resolvedor.ultima_fuente,
    }


@router.get("/facturas-impagas", summary="Facturas impagas del cliente")
def listar_facturas(params: dict = Depends(parametros_filtro),
                    usuario: UsuarioToken = Depends(get_current_user),
                    token: Optional[str] = Depends(obtener_token),
                    resolvedor: ResolvedorDatos = Depends(get_resolvedor)):
    filtros = construir_filtros(TipoRegistro.FACTURAS, params)
    facturas = _resolver(resolvedor, usuario, TipoRegistro.FACTURAS, filtros, token)
    return {
        "success": True,
        "data": [f.to_dict() for f in facturas],
        "total": len(facturas),
        "fuente": resolvedor.ultima_fuente,
    }


@router.get("/estadisticas", summary="Resumen estadístico del cliente")
def estadisticas(usuario: UsuarioToken = Depends(get_current_user),
                 token: Optional[str] = Depends(obtener_token),
                 resolvedor: ResolvedorDatos = Depends(get_resolvedor)):
    guias = _resolver(resolvedor, usuario, TipoRegistro.GUIAS, None, token)
    facturas = _resolver(resolvedor, usuario, TipoRegistro.FACTURAS, None, token)
    return {"success": True, "data": calcular_estadisticas(guias, facturas)}


@router.get("/filtros/{tipo}", summary="Valores disponibles para los filtros")
def valores_filtro(tipo: str = Path(..., description="guias | facturas"),
                   usuario: UsuarioToken = Depends(get_current_user),
                   token: Optional[str] = Depends(obtener_token),
                   resolvedor: ResolvedorDatos = Depends(get_resolvedor)):
    tipo_registro = _tipo(tipo)
    registros = _resolver(resolvedor, usuario, tipo_registro, None, token)
    return {"success": True, "data": resolvedor.valores_filtro(tipo_registro, registros)}


@router.get("/exportar/{tipo}/{formato}", summary="Exportar registros a Excel o PDF")
def exportar(tipo: str = Path(..., description="guias | facturas"),
             formato: str = Path(..., description="xlsx | pdf"),
             cliente: Optional[str] = Query(None, description="Nombre del cliente para el archivo"),
             params: dict = Depends(parametros_filtro),
             usuario: UsuarioToken = Depends(get_current_user),
             token: Optional[str] = Depends(obtener_token),
             resolvedor: ResolvedorDatos = Depends(get_resolvedor),
             autenticador: Autenticador = Depends(get_autenticador),
             export_service: ExportService = Depends(get_export_service)):
    tipo_registro = _tipo(tipo)
    filtros = construir_filtros(tipo_registro, params)
    registros = _resolver(resolvedor, usuario, tipo_registro, filtros, token)

    if not cliente:
        try:
            cliente = (autenticador.sesion(token).get("cliente") or {}).get("nombre")
        except Exception as e:
            raise _http(e)
    cliente = cliente or f"Cliente {usuario.cliente_id}"

    try:
        archivo = export_service.exportar(tipo_registro, formato, registros, cliente)
    except Exception as e:
        raise _http(e)

    return Response(
        content=archivo.contenido,
        media_type=archivo.media_type,
        headers={"Content-Disposition": f'attachment; filename="{archivo.nombre}"'},
    )


# --------
# Operación
# --------
@router.post("/cache/invalidar", summary="Invalidar cache de registros")
def invalidar_cache(tipo: Optional[str] = Query(None, description="guias | facturas; vacío = todo"),
                    usuario: UsuarioToken = Depends(get_current_user),
                    resolvedor: ResolvedorDatos = Depends(get_resolvedor)):
    tipo_registro = _tipo(tipo) if tipo else None
    resolvedor.invalidar_cache(tipo_registro)
    return {"success": True, "message": "Cache invalidado"}


@router.get("/conexion", summary="Estado de las fuentes de datos")
def info_conexion(usuario: UsuarioToken = Depends(get_current_user),
                  resolvedor: ResolvedorDatos = Depends(get_resolvedor)):
    return {"success": True, "data": resolvedor.info_conexion()}
