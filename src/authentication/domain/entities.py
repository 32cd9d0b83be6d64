#authentication/domain/entities.py

from dataclasses import dataclass, asdict
from typing import Optional


@dataclass
class Cliente:
    id: int
    nombre: str
    rut: Optional[str] = None
    direccion: Optional[str] = None
    telefono: Optional[str] = None
    email: Optional[str] = None
    tipo_cliente: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Usuario:
    id: int
    usu_login: str
    clave_hash: str
    activo: bool
    cliente_id: int
    nombre: Optional[str] = None
    email: Optional[str] = None

    def to_dict(self) -> dict:
        # nunca exponer el hash
        return {
            "id": self.id,
            "usu_login": self.usu_login,
            "usu_activo": "SI" if self.activo else "NO",
            "clienteId": self.cliente_id,
            "nombre": self.nombre,
            "email": self.email,
        }


@dataclass
class UsuarioToken:
    id: int
    cliente_id: int
    nombre: Optional[str] = None
    login: Optional[str] = None
