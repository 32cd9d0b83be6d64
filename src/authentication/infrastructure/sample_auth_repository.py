# authentication/infrastructure/sample_auth_repository.py

import os
from typing import Optional

from authentication.domain.entities import Usuario, Cliente
from authentication.utils.password_utils import generar_hash_clave
from informes.infrastructure import datos_embebidos

CLAVE_DEMO = os.getenv("CLAVE_DEMO", "demo123")


class RepositorioAuthEmbebido:
    """
    Misma interfaz de lectura que AuthRepository, sobre los usuarios y clientes
    embebidos. Todos los usuarios comparten la clave de demostración, que se
    hashea con bcrypt una sola vez por instancia.
    """

    def __init__(self, usuarios=None, clientes=None, clave_demo: str | None = None):
        self._usuarios = list(datos_embebidos.USUARIOS if usuarios is None else usuarios)
        self._clientes = list(datos_embebidos.CLIENTES if clientes is None else clientes)
        self._clave_demo = clave_demo or CLAVE_DEMO
        self._hash_demo = None

    @property
    def hash_demo(self) -> str:
        if self._hash_demo is None:
            self._hash_demo = generar_hash_clave(self._clave_demo)
        return self._hash_demo

    def _usuario(self, fila: dict) -> Usuario:
        return Usuario(
            id=fila["id"],
            usu_login=fila["usu_login"],
            clave_hash=self.hash_demo,
            activo=str(fila.get("usu_activo", "NO")).upper() == "SI",
            cliente_id=fila["clienteId"],
            nombre=fila.get("nombre"),
            email=fila.get("email"),
        )

    def buscar_usuario_por_login(self, login: str) -> Optional[Usuario]:
        for fila in self._usuarios:
            if fila["usu_login"] == login:
                return self._usuario(fila)
        return None

    def buscar_usuario_por_id(self, usuario_id: int) -> Optional[Usuario]:
        for fila in self._usuarios:
            if fila["id"] == usuario_id:
                return self._usuario(fila)
        return None

    def buscar_cliente_por_id(self, cliente_id: int) -> Optional[Cliente]:
        for fila in self._clientes:
            if fila["id"] == cliente_id:
                return Cliente(**fila)
        return None
