# authentication/manage_users.py

import argparse
import sys

from authentication.domain.entities import Cliente, Usuario
from authentication.infrastructure.auth_repository import AuthRepository
from authentication.infrastructure.database_connection import conectar_base, cerrar_conexion
from authentication.utils.password_utils import generar_hash_clave


def crear_cliente(nombre, rut=None, direccion=None, telefono=None, email=None, tipo_cliente=None, conn=None):
    propia = conn is None
    conn = conn or conectar_base()
    if conn is None:
        print("❌ No fue posible conectar a la base de datos.")
        return None
    try:
        cliente = Cliente(id=0, nombre=nombre, rut=rut, direccion=direccion,
                          telefono=telefono, email=email, tipo_cliente=tipo_cliente)
        cliente_id = AuthRepository(conn).crear_cliente(cliente)
        print(f"✅ Cliente {nombre} creado con éxito. ID={cliente_id}")
        return cliente_id
    except Exception as e:
        conn.rollback()
        print("❌ Error al crear cliente:", e)
        return None
    finally:
        if propia:
            cerrar_conexion(conn)


def crear_usuario(login, clave, cliente_id, nombre=None, email=None, activo=True, conn=None):
    propia = conn is None
    conn = conn or conectar_base()
    if conn is None:
        print("❌ No fue posible conectar a la base de datos.")
        return None
    try:
        repo = AuthRepository(conn)
        if repo.buscar_cliente_por_id(cliente_id) is None:
            print(f"❌ El cliente {cliente_id} no existe.")
            return None

        usuario = Usuario(
            id=0,
            usu_login=login,
            clave_hash=generar_hash_clave(clave),
            activo=activo,
            cliente_id=cliente_id,
            nombre=nombre,
            email=email,
        )
        usuario_id = repo.crear_usuario(usuario)
        print(f"✅ Usuario {login} (cliente {cliente_id}) creado con éxito. ID={usuario_id}")
        return usuario_id
    except Exception as e:
        conn.rollback()
        print("❌ Error al crear usuario:", e)
        return None
    finally:
        if propia:
            cerrar_conexion(conn)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Gestión de clientes y usuarios LOGISAMB")
    subparsers = parser.add_subparsers(dest="command")

    cliente_parser = subparsers.add_parser("create-cliente", help="Crear nuevo cliente (tenant)")
    cliente_parser.add_argument("--nombre", required=True, help="Nombre de la empresa")
    cliente_parser.add_argument("--rut", help="RUT de la empresa")
    cliente_parser.add_argument("--direccion")
    cliente_parser.add_argument("--telefono")
    cliente_parser.add_argument("--email")
    cliente_parser.add_argument("--tipo-cliente", dest="tipo_cliente")

    user_parser = subparsers.add_parser("create-user", help="Crear nuevo usuario")
    user_parser.add_argument("--login", required=True, help="Login del usuario (usu_login)")
    user_parser.add_argument("--clave", required=True, help="Contraseña (se guarda con bcrypt)")
    user_parser.add_argument("--cliente-id", dest="cliente_id", type=int, required=True, help="ID del cliente")
    user_parser.add_argument("--nombre")
    user_parser.add_argument("--email")
    user_parser.add_argument("--inactivo", action="store_true", help="Crear el usuario deshabilitado")

    args = parser.parse_args(argv)

    if args.command == "create-cliente":
        ok = crear_cliente(args.nombre, args.rut, args.direccion, args.telefono, args.email, args.tipo_cliente)
    elif args.command == "create-user":
        if args.cliente_id <= 0:
            print("❌ --cliente-id debe ser un entero positivo")
            return 1
        ok = crear_usuario(args.login, args.clave, args.cliente_id, args.nombre, args.email, not args.inactivo)
    else:
        parser.print_help()
        return 1
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
