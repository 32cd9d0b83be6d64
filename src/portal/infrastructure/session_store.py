# portal/infrastructure/session_store.py

import json
import os
from typing import Optional

from utils.logging_factory import get_logger

logger = get_logger("session_store")

CLAVE_TOKEN = "residue_token"
CLAVE_USUARIO = "mock_user_id"


class AlmacenSesion:
    """Persiste la sesión del CLI en un archivo JSON con claves fijas."""

    def __init__(self, ruta: str):
        self.ruta = os.path.expanduser(ruta)

    def guardar(self, token: str, usuario_id: int) -> None:
        os.makedirs(os.path.dirname(self.ruta) or ".", exist_ok=True)
        with open(self.ruta, "w", encoding="utf-8") as f:
            json.dump({CLAVE_TOKEN: token, CLAVE_USUARIO: usuario_id}, f)
        try:
            os.chmod(self.ruta, 0o600)
        except OSError as e:
            logger.debug(f"No se pudieron ajustar permisos de {self.ruta}: {e}")

    def cargar(self) -> Optional[dict]:
        if not os.path.exists(self.ruta):
            return None
        try:
            with open(self.ruta, encoding="utf-8") as f:
                datos = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"⚠️ Archivo de sesión ilegible, se descarta: {e}")
            self.limpiar()
            return None
        if not isinstance(datos, dict) or not datos.get(CLAVE_TOKEN):
            self.limpiar()
            return None
        return datos

    def limpiar(self) -> None:
        if os.path.exists(self.ruta):
            os.remove(self.ruta)
