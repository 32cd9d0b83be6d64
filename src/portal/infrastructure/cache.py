# portal/infrastructure/cache.py

import time
from typing import Callable, Optional

from informes.domain.entities import TipoRegistro
from utils.logging_factory import get_logger

logger = get_logger("cache_registros")


class CacheRegistros:
    """
    Cache en memoria de los lotes completos descargados del JSON remoto, uno por
    tipo de registro. Vive dentro del resolvedor; no es global.
    """

    def __init__(self, ttl_segundos: int = 300, reloj: Callable[[], float] = time.monotonic):
        self.ttl_segundos = ttl_segundos
        self._reloj = reloj
        self._entradas: dict = {}

    def es_valido(self, tipo: TipoRegistro) -> bool:
        entrada = self._entradas.get(tipo)
        if entrada is None:
            return False
        guardado_en, _ = entrada
        return (self._reloj() - guardado_en) < self.ttl_segundos

    def obtener(self, tipo: TipoRegistro) -> Optional[list]:
        if not self.es_valido(tipo):
            return None
        logger.debug(f"Cache encontrado para {tipo.value}")
        return list(self._entradas[tipo][1])

    def guardar(self, tipo: TipoRegistro, filas: list) -> None:
        self._entradas[tipo] = (self._reloj(), list(filas))
        logger.info(f"💾 Cache guardado para {tipo.value} ({len(filas)} filas)")

    def invalidar(self, tipo: Optional[TipoRegistro] = None) -> None:
        if tipo is None:
            self._entradas.clear()
            logger.info("🧹 Cache completo invalidado")
        else:
            self._entradas.pop(tipo, None)
            logger.info(f"🧹 Cache invalidado para {tipo.value}")

    def estado(self) -> dict:
        return {t.value: self.es_valido(t) for t in TipoRegistro}
