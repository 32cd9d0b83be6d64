# authentication/infrastructure/token_service.py
import os
import jwt
from datetime import datetime, timedelta, timezone
from dotenv import load_dotenv

from authentication.domain.entities import UsuarioToken
from authentication.domain.exceptions import SesionInvalida

load_dotenv()

SECRET_KEY = os.getenv("JWT_SECRET_KEY", "logisamb-secret-key-2025")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
EXPIRACION_MINUTOS = int(os.getenv("JWT_EXPIRACION_MINUTOS", "1440"))


def generar_token(usuario_id: int, cliente_id: int, nombre: str | None, login: str | None = None,
                  expiracion_minutos: int | None = None) -> str:
    minutos = EXPIRACION_MINUTOS if expiracion_minutos is None else expiracion_minutos
    payload = {
        "sub": str(usuario_id),
        "cliente": cliente_id,
        "nombre": nombre,
        "login": login,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutos),
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def verificar_token(token: str) -> dict:
    return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])


def decodificar_usuario(token: str | None) -> UsuarioToken:
    if not token:
        raise SesionInvalida("Token de acceso requerido")
    try:
        payload = verificar_token(token)
    except jwt.ExpiredSignatureError:
        raise SesionInvalida("Token expirado")
    except jwt.InvalidTokenError:
        raise SesionInvalida("Token inválido")

    cliente_id = payload.get("cliente")
    if not isinstance(cliente_id, int) or isinstance(cliente_id, bool) or cliente_id <= 0:
        raise SesionInvalida("Token sin cliente asociado")

    try:
        usuario_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise SesionInvalida("Token inválido")

    return UsuarioToken(
        id=usuario_id,
        cliente_id=cliente_id,
        nombre=payload.get("nombre"),
        login=payload.get("login"),
    )
