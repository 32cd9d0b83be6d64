# authentication/infrastructure/auth_repository.py

from typing import Optional

from authentication.domain.entities import Usuario, Cliente


def _usuario_desde_fila(row) -> Usuario:
    id_, login, clave_hash, activo, cliente_id, nombre, email = row
    return Usuario(
        id=id_,
        usu_login=login,
        clave_hash=clave_hash,
        activo=str(activo).upper() == "SI",
        cliente_id=cliente_id,
        nombre=nombre,
        email=email,
    )


class AuthRepository:
    def __init__(self, conn):
        if conn is None:
            raise ValueError("❌ La conexión con la base de datos falló y es None.")
        self.conn = conn

    def buscar_usuario_por_login(self, login: str) -> Optional[Usuario]:
        query = """
        SELECT id, usu_login, usu_pwd, usu_activo, cliente_id, nombre, email
        FROM usuarios
        WHERE usu_login = %s
        LIMIT 1
        """
        with self.conn.cursor() as cur:
            cur.execute(query, (login,))
            row = cur.fetchone()
            if not row:
                return None
            return _usuario_desde_fila(row)

    def buscar_usuario_por_id(self, usuario_id: int) -> Optional[Usuario]:
        query = """
        SELECT id, usu_login, usu_pwd, usu_activo, cliente_id, nombre, email
        FROM usuarios
        WHERE id = %s
        LIMIT 1
        """
        with self.conn.cursor() as cur:
            cur.execute(query, (usuario_id,))
            row = cur.fetchone()
            if not row:
                return None
            return _usuario_desde_fila(row)

    def buscar_cliente_por_id(self, cliente_id: int) -> Optional[Cliente]:
        query = """
        SELECT id, nombre, rut, direccion, telefono, email, tipo_cliente
        FROM empresas
        WHERE id = %s
        """
        with self.conn.cursor() as cur:
            cur.execute(query, (cliente_id,))
            row = cur.fetchone()
            if not row:
                return None
            return Cliente(*row)

    def crear_usuario(self, usuario: Usuario) -> int:
        query = """
        INSERT INTO usuarios (usu_login, usu_pwd, usu_activo, cliente_id, nombre, email)
        VALUES (%s, %s, %s, %s, %s, %s)
        RETURNING id
        """
        with self.conn.cursor() as cur:
            cur.execute(query, (
                usuario.usu_login,
                usuario.clave_hash,
                "SI" if usuario.activo else "NO",
                usuario.cliente_id,
                usuario.nombre,
                usuario.email,
            ))
            nuevo_id = cur.fetchone()[0]
        self.conn.commit()
        return nuevo_id

    def crear_cliente(self, cliente: Cliente) -> int:
        query = """
        INSERT INTO empresas (nombre, rut, direccion, telefono, email, tipo_cliente, activo)
        VALUES (%s, %s, %s, %s, %s, %s, 'SI')
        RETURNING id
        """
        with self.conn.cursor() as cur:
            cur.execute(query, (
                cliente.nombre,
                cliente.rut,
                cliente.direccion,
                cliente.telefono,
                cliente.email,
                cliente.tipo_cliente,
            ))
            nuevo_id = cur.fetchone()[0]
        self.conn.commit()
        return nuevo_id
