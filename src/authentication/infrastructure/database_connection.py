#authentication/infrastructure/database_connection.py

import os
import psycopg2
from dotenv import load_dotenv

from utils.logging_factory import get_logger

# 🟩 Carga variables del .env global del proyecto
dotenv_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..', '..', '.env'))
load_dotenv(dotenv_path)

logger = get_logger("database")


def conectar_base():
    try:
        conn = psycopg2.connect(
            dbname=os.getenv("DB_DATABASE", "logisamb"),
            user=os.getenv("DB_USER"),
            password=os.getenv("DB_PASS"),
            host=os.getenv("DB_HOST", "localhost"),
            port=os.getenv("DB_PORT", "5432"),
            connect_timeout=int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
        )
        logger.info("✅ Conexión con la base de datos establecida.")
        return conn
    except Exception as e:
        logger.error(f"❌ Error al conectar a la base de datos: {e}")
        return None


def cerrar_conexion(conn):
    if conn:
        conn.close()
