# informes/domain/aislamiento.py

from informes.domain.exceptions import ViolacionSeguridad
from utils.logging_factory import get_logger

logger = get_logger("aislamiento")


def filtrar_por_cliente(registros: list, cliente_id: int) -> list:
    return [r for r in registros if r.cliente_id == cliente_id]


def verificar_aislamiento(registros: list, cliente_id: int) -> list:
    """
    Última verificación antes de entregar datos: si aparece un solo registro de
    otro cliente se descarta el resultado completo.
    """
    ajenos = {r.cliente_id for r in registros if r.cliente_id != cliente_id}
    if ajenos:
        logger.error(f"🚨 ALERTA DE SEGURIDAD: registros de clientes {sorted(ajenos)} en consulta de {cliente_id}")
        raise ViolacionSeguridad(cliente_id, ajenos)
    return registros
