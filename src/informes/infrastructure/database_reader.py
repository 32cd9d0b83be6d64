# informes/infrastructure/database_reader.py

from datetime import date
from typing import Optional

from psycopg2.extras import RealDictCursor

from utils.logging_factory import get_logger

logger = get_logger("database_reader")


def _clausula_fechas(columna: str, inicio: Optional[date], fin: Optional[date]):
    clausulas, params = [], []
    if inicio:
        clausulas.append(f"{columna} >= %s")
        params.append(inicio)
    if fin:
        clausulas.append(f"{columna} <= %s")
        params.append(fin)
    sql = (" AND " + " AND ".join(clausulas)) if clausulas else ""
    return sql, params


class RegistrosReader:
    """Lee guías y facturas impagas de un cliente. Siempre filtra por cliente_id en SQL."""

    def __init__(self, conn):
        if conn is None:
            raise ValueError("❌ La conexión con la base de datos falló y es None.")
        self.conn = conn

    def listar_guias(self, cliente_id: int, fecha_inicio: Optional[date] = None,
                     fecha_fin: Optional[date] = None) -> list[dict]:
        filtro, params = _clausula_fechas("fecha", fecha_inicio, fecha_fin)
        sql = f"""
            SELECT id, guia, fecha, cliente_id AS "clienteId", sucursal, servicio, frecuencia,
                   lts_limite, lts_retirados, valor_servicio, valor_lt_adic, patente, total,
                   observaciones
            FROM guias
            WHERE cliente_id = %s{filtro}
            ORDER BY fecha DESC, id DESC
        """
        with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(sql, (cliente_id, *params))
            rows = cur.fetchall()
        logger.info(f"📦 {len(rows)} guías leídas para cliente {cliente_id}")
        return [dict(r) for r in rows]

    def listar_facturas(self, cliente_id: int, fecha_inicio: Optional[date] = None,
                        fecha_fin: Optional[date] = None) -> list[dict]:
        filtro, params = _clausula_fechas("fecha", fecha_inicio, fecha_fin)
        sql = f"""
            SELECT id, fecha, empresa, sucursal, rut, no_guia, dias_mora, nro_factura,
                   fecha_factura, cliente_id AS "clienteId", monto_factura, observaciones
            FROM facturas_impagas
            WHERE cliente_id = %s{filtro}
            ORDER BY dias_mora DESC, fecha_factura ASC
        """
        with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(sql, (cliente_id, *params))
            rows = cur.fetchall()
        logger.info(f"📦 {len(rows)} facturas impagas leídas para cliente {cliente_id}")
        return [dict(r) for r in rows]


def verificar_conexion(conn) -> bool:
    try:
        with conn.cursor() as cur:
            cur.execute("SELECT 1")
            cur.fetchone()
        return True
    except Exception as e:
        logger.error(f"❌ Base de datos no responde: {e}")
        return False
