# authentication/api/routes.py

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, AliasChoices, Field

from authentication.application.auth_service import AuthService
from authentication.domain.entities import UsuarioToken
from authentication.domain.exceptions import (
    EntradaInvalida,
    CredencialesInvalidas,
    ClienteNoEncontrado,
)
from authentication.infrastructure.auth_repository import AuthRepository
from authentication.infrastructure.database_connection import conectar_base, cerrar_conexion
from authentication.utils.dependencies import get_current_user
from utils.logging_factory import get_logger

router = APIRouter(tags=["Authentication"])
logger = get_logger("auth_routes")


# --------
# Models
# --------
class LoginRequest(BaseModel):
    login: str = Field("", validation_alias=AliasChoices("login", "usu_login"))
    password: str = Field("", validation_alias=AliasChoices("password", "usu_pwd"))


def obtener_auth_service():
    conn = conectar_base()
    if conn is None:
        raise HTTPException(status_code=503, detail="Base de datos no disponible")
    try:
        yield AuthService(AuthRepository(conn))
    finally:
        cerrar_conexion(conn)


# --------
# Endpoints
# --------
@router.post("/login", summary="Iniciar sesión y obtener token JWT")
def login(request: LoginRequest, service: AuthService = Depends(obtener_auth_service)):
    try:
        data = service.login(request.login, request.password)
    except EntradaInvalida as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CredencialesInvalidas as e:
        raise HTTPException(status_code=401, detail=str(e))
    except ClienteNoEncontrado as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"success": True, "data": data}


@router.get("/me", summary="Datos del usuario autenticado")
def me(user: UsuarioToken = Depends(get_current_user),
       service: AuthService = Depends(obtener_auth_service)):
    try:
        data = service.obtener_sesion(user.id)
    except CredencialesInvalidas as e:
        raise HTTPException(status_code=401, detail=str(e))
    except ClienteNoEncontrado as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"success": True, "data": data}


@router.post("/logout", summary="Cerrar sesión")
def logout(user: UsuarioToken = Depends(get_current_user)):
    # JWT sin estado: el cliente descarta el token
    logger.info(f"🔹 Logout usuario {user.id} (cliente {user.cliente_id})")
    return {"success": True, "message": "Sesión cerrada correctamente"}
