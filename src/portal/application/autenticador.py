# portal/application/autenticador.py

from enum import Enum
from typing import Optional

from authentication.application.auth_service import AuthService
from authentication.domain.entities import UsuarioToken
from authentication.domain.exceptions import (
    EntradaInvalida,
    CredencialesInvalidas,
    SesionInvalida,
)
from authentication.infrastructure.sample_auth_repository import RepositorioAuthEmbebido
from authentication.infrastructure.token_service import decodificar_usuario
from informes.domain.exceptions import FuenteNoDisponible
from portal.infrastructure.backend_client import ClienteBackend
from utils.logging_factory import get_logger

logger = get_logger("autenticador")

ORIGEN_BACKEND = "backend"
ORIGEN_EMBEBIDO = "embebido"


class Autenticador:
    """
    Login del portal: primero la API backend; si no responde (red, timeout,
    5xx) o el modo demo está activo, el almacén embebido con la clave de demo.
    Un 401/400 del backend es una respuesta definitiva y no activa el respaldo.
    """

    def __init__(self, backend: Optional[ClienteBackend] = None, modo_demo: bool = False,
                 servicio_embebido: Optional[AuthService] = None):
        self.backend = backend
        self.modo_demo = modo_demo
        self.embebido = servicio_embebido or AuthService(RepositorioAuthEmbebido())

    @property
    def usa_backend(self) -> bool:
        return self.backend is not None and not self.modo_demo

    def login(self, login: str, clave: str) -> dict:
        login = (login or "").strip()
        if not login or not clave:
            raise EntradaInvalida("Usuario y contraseña son requeridos")

        if self.usa_backend:
            try:
                data = self.backend.login(login, clave)
                logger.info(f"✅ Login vía backend: {login}")
                return {**data, "origen": ORIGEN_BACKEND}
            except FuenteNoDisponible as e:
                logger.warning(f"⚠️ Backend no disponible, usando credenciales embebidas: {e}")

        data = self.embebido.login(login, clave)
        return {**data, "origen": ORIGEN_EMBEBIDO}

    def verificar(self, token: Optional[str]) -> UsuarioToken:
        return decodificar_usuario(token)

    def sesion(self, token: str) -> dict:
        """Usuario y cliente de un token válido (para /me)."""
        usuario = self.verificar(token)

        if self.usa_backend:
            try:
                return self.backend.me(token)
            except FuenteNoDisponible as e:
                logger.warning(f"⚠️ /auth/me sin respuesta, se resuelve localmente: {e}")

        try:
            resultado = self.embebido.obtener_sesion(usuario.id)
        except CredencialesInvalidas:
            resultado = None

        if resultado and self._corresponde(resultado, usuario):
            return resultado

        # token emitido por el backend para un usuario que no está (o es otro) en los datos embebidos
        return {
            "usuario": {"id": usuario.id, "usu_login": usuario.login,
                        "nombre": usuario.nombre, "clienteId": usuario.cliente_id},
            "cliente": {"id": usuario.cliente_id},
        }

    @staticmethod
    def _corresponde(resultado: dict, usuario: UsuarioToken) -> bool:
        """El registro embebido con el mismo id sólo vale si es del mismo cliente y login del token."""
        if resultado["cliente"]["id"] != usuario.cliente_id:
            logger.warning(f"⚠️ Usuario {usuario.id} del token no pertenece al cliente {usuario.cliente_id} en datos embebidos")
            return False
        if usuario.login and resultado["usuario"]["usu_login"] != usuario.login:
            return False
        return True

    def logout(self, token: Optional[str]) -> None:
        if token and self.usa_backend:
            try:
                self.backend.logout(token)
            except FuenteNoDisponible as e:
                logger.warning(f"⚠️ Logout en backend falló (se cierra igual localmente): {e}")


class EstadoSesion(str, Enum):
    ANONIMO = "anonimo"
    AUTENTICADO = "autenticado"


class SesionPortal:
    """Sesión del usuario del portal. ANONIMO -> AUTENTICADO al iniciar; vuelve a ANONIMO al cerrar o si el token deja de ser válido."""

    def __init__(self, autenticador: Autenticador):
        self.autenticador = autenticador
        self._limpiar()

    def _limpiar(self):
        self.estado = EstadoSesion.ANONIMO
        self.token: Optional[str] = None
        self.usuario: Optional[UsuarioToken] = None
        self.datos: Optional[dict] = None
        self.origen: Optional[str] = None

    @property
    def autenticada(self) -> bool:
        return self.estado == EstadoSesion.AUTENTICADO

    def iniciar(self, login: str, clave: str) -> dict:
        resultado = self.autenticador.login(login, clave)
        self.token = resultado["token"]
        self.usuario = self.autenticador.verificar(self.token)
        self.datos = resultado
        self.origen = resultado.get("origen")
        self.estado = EstadoSesion.AUTENTICADO
        return resultado

    def restaurar(self, token: Optional[str]) -> UsuarioToken:
        try:
            usuario = self.autenticador.verificar(token)
        except SesionInvalida:
            self._limpiar()
            raise
        self.token = token
        self.usuario = usuario
        self.estado = EstadoSesion.AUTENTICADO
        return usuario

    def verificar(self) -> UsuarioToken:
        if not self.autenticada:
            raise SesionInvalida("No hay sesión iniciada")
        return self.restaurar(self.token)

    @property
    def cliente_id(self) -> int:
        return self.verificar().cliente_id

    def cerrar(self) -> None:
        self.autenticador.logout(self.token)
        self._limpiar()
