# authentication/utils/dependencies.py

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from authentication.domain.entities import UsuarioToken
from authentication.domain.exceptions import SesionInvalida
from authentication.infrastructure.token_service import decodificar_usuario

# Instancia global de HTTPBearer; auto_error=False para responder 401 (no 403) sin header
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)
) -> UsuarioToken:
    """
    Valida el token JWT y devuelve el UsuarioToken con el cliente de la sesión.
    Lanza HTTP 401 si el token falta, es inválido o expiró.
    """
    token = credentials.credentials if credentials else None
    try:
        return decodificar_usuario(token)
    except SesionInvalida as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


def obtener_token(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> str | None:
    return credentials.credentials if credentials else None
