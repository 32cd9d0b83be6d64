# informes/setup_database.py
#
# Crea las tablas del backend en PostgreSQL y, opcionalmente, carga los datos
# de muestra (clientes 57/58/59, sus usuarios, guías y facturas impagas).

import argparse
import sys

from authentication.infrastructure.database_connection import conectar_base, cerrar_conexion
from authentication.infrastructure.sample_auth_repository import CLAVE_DEMO
from authentication.utils.password_utils import generar_hash_clave
from informes.infrastructure import datos_embebidos
from utils.logging_factory import get_logger

logger = get_logger("setup_database")

TABLAS = {
    "empresas": """
        CREATE TABLE IF NOT EXISTS empresas (
            id SERIAL PRIMARY KEY,
            nombre VARCHAR(255) NOT NULL,
            rut VARCHAR(20),
            direccion TEXT,
            telefono VARCHAR(50),
            email VARCHAR(255),
            tipo_cliente VARCHAR(100),
            activo VARCHAR(2) NOT NULL DEFAULT 'SI' CHECK (activo IN ('SI', 'NO')),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """,
    "usuarios": """
        CREATE TABLE IF NOT EXISTS usuarios (
            id SERIAL PRIMARY KEY,
            usu_login VARCHAR(100) NOT NULL UNIQUE,
            usu_pwd VARCHAR(255) NOT NULL,
            usu_activo VARCHAR(2) NOT NULL DEFAULT 'SI' CHECK (usu_activo IN ('SI', 'NO')),
            cliente_id INT NOT NULL REFERENCES empresas(id),
            nombre VARCHAR(255),
            email VARCHAR(255),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """,
    "guias": """
        CREATE TABLE IF NOT EXISTS guias (
            id SERIAL PRIMARY KEY,
            guia VARCHAR(50) NOT NULL,
            fecha DATE NOT NULL,
            cliente_id INT NOT NULL REFERENCES empresas(id) ON DELETE CASCADE,
            sucursal VARCHAR(255) NOT NULL,
            servicio VARCHAR(255) NOT NULL,
            frecuencia VARCHAR(100) NOT NULL,
            lts_limite INT DEFAULT 0,
            lts_retirados INT NOT NULL,
            valor_servicio INT NOT NULL,
            valor_lt_adic INT DEFAULT 0,
            patente VARCHAR(20),
            total INT NOT NULL,
            observaciones TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """,
    "facturas_impagas": """
        CREATE TABLE IF NOT EXISTS facturas_impagas (
            id SERIAL PRIMARY KEY,
            fecha DATE NOT NULL,
            empresa VARCHAR(255) NOT NULL,
            sucursal VARCHAR(255) NOT NULL,
            rut VARCHAR(20) NOT NULL,
            no_guia VARCHAR(50) NOT NULL,
            dias_mora INT NOT NULL,
            nro_factura VARCHAR(50) NOT NULL,
            fecha_factura DATE NOT NULL,
            cliente_id INT NOT NULL REFERENCES empresas(id) ON DELETE CASCADE,
            monto_factura INT NOT NULL,
            observaciones TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """,
}

INDICES = [
    "CREATE INDEX IF NOT EXISTS idx_usuarios_cliente ON usuarios (cliente_id)",
    "CREATE INDEX IF NOT EXISTS idx_guias_cliente_fecha ON guias (cliente_id, fecha)",
    "CREATE INDEX IF NOT EXISTS idx_facturas_cliente_mora ON facturas_impagas (cliente_id, dias_mora)",
]


def crear_tablas(conn):
    with conn.cursor() as cur:
        for nombre, ddl in TABLAS.items():
            cur.execute(ddl)
            logger.info(f"✅ Tabla {nombre} verificada")
        for ddl in INDICES:
            cur.execute(ddl)
    conn.commit()


def cargar_datos_muestra(conn, clave: str = CLAVE_DEMO):
    clave_hash = generar_hash_clave(clave)
    with conn.cursor() as cur:
        for c in datos_embebidos.CLIENTES:
            cur.execute("""
                INSERT INTO empresas (id, nombre, rut, direccion, telefono, email, tipo_cliente)
                VALUES (%(id)s, %(nombre)s, %(rut)s, %(direccion)s, %(telefono)s, %(email)s, %(tipo_cliente)s)
                ON CONFLICT (id) DO NOTHING
            """, c)

        for u in datos_embebidos.USUARIOS:
            cur.execute("""
                INSERT INTO usuarios (id, usu_login, usu_pwd, usu_activo, cliente_id, nombre, email)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                ON CONFLICT (usu_login) DO NOTHING
            """, (u["id"], u["usu_login"], clave_hash, u["usu_activo"], u["clienteId"], u["nombre"], u["email"]))

        for g in datos_embebidos.GUIAS:
            cur.execute("""
                INSERT INTO guias (id, guia, fecha, cliente_id, sucursal, servicio, frecuencia,
                                   lts_limite, lts_retirados, valor_servicio, valor_lt_adic,
                                   patente, total, observaciones)
                VALUES (%(id)s, %(guia)s, %(fecha)s, %(clienteId)s, %(sucursal)s, %(servicio)s, %(frecuencia)s,
                        %(lts_limite)s, %(lts_retirados)s, %(valor_servicio)s, %(valor_lt_adic)s,
                        %(patente)s, %(total)s, %(observaciones)s)
                ON CONFLICT (id) DO NOTHING
            """, g)

        for f in datos_embebidos.FACTURAS_IMPAGAS:
            cur.execute("""
                INSERT INTO facturas_impagas (id, fecha, empresa, sucursal, rut, no_guia, dias_mora,
                                              nro_factura, fecha_factura, cliente_id, monto_factura,
                                              observaciones)
                VALUES (%(id)s, %(fecha)s, %(empresa)s, %(sucursal)s, %(rut)s, %(no_guia)s, %(dias_mora)s,
                        %(nro_factura)s, %(fecha_factura)s, %(clienteId)s, %(monto_factura)s,
                        %(observaciones)s)
                ON CONFLICT (id) DO NOTHING
            """, f)

        # ids explícitos: alinear las secuencias SERIAL
        for tabla in TABLAS:
            cur.execute(
                f"SELECT setval(pg_get_serial_sequence('{tabla}', 'id'), COALESCE(MAX(id), 1)) FROM {tabla}"
            )
    conn.commit()
    logger.info(
        f"✅ Datos de muestra cargados: {len(datos_embebidos.CLIENTES)} clientes, "
        f"{len(datos_embebidos.USUARIOS)} usuarios, {len(datos_embebidos.GUIAS)} guías, "
        f"{len(datos_embebidos.FACTURAS_IMPAGAS)} facturas"
    )


def main(argv=None):
    parser = argparse.ArgumentParser(description="Preparación de la base de datos LOGISAMB")
    parser.add_argument("--crear-tablas", action="store_true", help="Crea tablas e índices si no existen")
    parser.add_argument("--seed", action="store_true", help="Carga los datos de muestra")
    args = parser.parse_args(argv)

    if not (args.crear_tablas or args.seed):
        parser.print_help()
        return 1

    conn = conectar_base()
    if conn is None:
        return 1
    try:
        if args.crear_tablas:
            crear_tablas(conn)
        if args.seed:
            cargar_datos_muestra(conn)
    except Exception as e:
        conn.rollback()
        logger.error(f"❌ Error preparando la base de datos: {e}")
        return 1
    finally:
        cerrar_conexion(conn)
    return 0


if __name__ == "__main__":
    sys.exit(main())
