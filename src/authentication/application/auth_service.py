# authentication/application/auth_service.py

from authentication.domain.exceptions import (
    EntradaInvalida,
    CredencialesInvalidas,
    ClienteNoEncontrado,
)
from authentication.infrastructure.token_service import generar_token
from authentication.utils.password_utils import verificar_clave
from utils.logging_factory import get_logger

logger = get_logger("auth_service")


class AuthService:
    """
    Login contra un repositorio de credenciales (base de datos o embebido).
    El repositorio sólo necesita buscar_usuario_por_login, buscar_usuario_por_id
    y buscar_cliente_por_id.
    """

    def __init__(self, repo):
        self.repo = repo

    def login(self, login: str, clave: str) -> dict:
        login = (login or "").strip()
        if not login or not clave:
            raise EntradaInvalida("Usuario y contraseña son requeridos")

        usuario = self.repo.buscar_usuario_por_login(login)
        if not usuario or not usuario.activo:
            logger.warning(f"⚠️ Intento de login rechazado para '{login}'")
            raise CredencialesInvalidas("Usuario o contraseña incorrectos")

        if not verificar_clave(clave, usuario.clave_hash):
            logger.warning(f"⚠️ Contraseña incorrecta para '{login}'")
            raise CredencialesInvalidas("Usuario o contraseña incorrectos")

        cliente = self.repo.buscar_cliente_por_id(usuario.cliente_id)
        if not cliente:
            logger.error(f"❌ Usuario {usuario.id} apunta a cliente inexistente {usuario.cliente_id}")
            raise ClienteNoEncontrado("Cliente no encontrado para este usuario")

        token = generar_token(usuario.id, cliente.id, usuario.nombre, usuario.usu_login)
        logger.info(f"✅ Login exitoso: {login} (cliente {cliente.id})")

        return {
            "usuario": usuario.to_dict(),
            "cliente": cliente.to_dict(),
            "token": token,
        }

    def obtener_sesion(self, usuario_id: int) -> dict:
        usuario = self.repo.buscar_usuario_por_id(usuario_id)
        if not usuario or not usuario.activo:
            raise CredencialesInvalidas("Usuario no encontrado o inactivo")

        cliente = self.repo.buscar_cliente_por_id(usuario.cliente_id)
        if not cliente:
            raise ClienteNoEncontrado("Cliente no encontrado para este usuario")

        return {"usuario": usuario.to_dict(), "cliente": cliente.to_dict()}
