#portal/main_portal.py

import argparse
import os
import sys

import pandas as pd

from authentication.domain.exceptions import EntradaInvalida, CredencialesInvalidas, SesionInvalida
from informes.domain.entities import TipoRegistro
from informes.domain.estadisticas_service import calcular_estadisticas
from informes.domain.exceptions import FuenteNoDisponible, ViolacionSeguridad
from informes.domain.filtros import FiltrosGuias, FiltrosFacturas
from portal.application.autenticador import SesionPortal
from portal.application.factory import construir_autenticador, construir_resolvedor
from portal.config import Settings
from portal.domain.exceptions import ErrorExportacion
from portal.infrastructure.session_store import AlmacenSesion, CLAVE_TOKEN
from portal.visualization.export_service import ExportService
from portal.visualization.formatters import formatear_moneda, formatear_numero, formatear_porcentaje
from utils.logging_factory import get_logger

logger = get_logger("main_portal")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="🚛 Portal de clientes LOGISAMB (línea de comandos)")
    parser.add_argument("--refrescar", action="store_true", help="Invalida el cache antes de consultar")
    sub = parser.add_subparsers(dest="command")

    login = sub.add_parser("login", help="Iniciar sesión")
    login.add_argument("--usuario", required=True)
    login.add_argument("--clave", required=True)

    sub.add_parser("logout", help="Cerrar sesión")
    sub.add_parser("me", help="Mostrar usuario y cliente de la sesión")

    guias = sub.add_parser("guias", help="Listar guías de retiro")
    facturas = sub.add_parser("facturas", help="Listar facturas impagas")
    exportar = sub.add_parser("exportar", help="Exportar a Excel o PDF")
    exportar.add_argument("tipo", choices=["guias", "facturas"])
    exportar.add_argument("formato", choices=["xlsx", "pdf"])
    exportar.add_argument("--salida", default=".", help="Directorio de destino")

    for p in (guias, facturas, exportar):
        p.add_argument("--fecha-inicio", dest="fecha_inicio", help="AAAA-MM-DD")
        p.add_argument("--fecha-fin", dest="fecha_fin", help="AAAA-MM-DD")
        p.add_argument("--sucursal")
    for p in (guias, exportar):
        p.add_argument("--servicio")
        p.add_argument("--frecuencia")
    for p in (facturas, exportar):
        p.add_argument("--estado-mora", dest="estado_mora")
        p.add_argument("--dias-mora-min", dest="dias_mora_min", type=int)
        p.add_argument("--dias-mora-max", dest="dias_mora_max", type=int)

    sub.add_parser("estadisticas", help="Resumen estadístico del cliente")
    sub.add_parser("conexion", help="Estado de las fuentes de datos")
    return parser


def _filtros(tipo: TipoRegistro, args):
    comunes = {
        "fecha_inicio": getattr(args, "fecha_inicio", None),
        "fecha_fin": getattr(args, "fecha_fin", None),
        "sucursal": getattr(args, "sucursal", None),
    }
    if tipo == TipoRegistro.GUIAS:
        return FiltrosGuias(servicio=getattr(args, "servicio", None),
                            frecuencia=getattr(args, "frecuencia", None), **comunes)
    return FiltrosFacturas(estado_mora=getattr(args, "estado_mora", None),
                           dias_mora_min=getattr(args, "dias_mora_min", None),
                           dias_mora_max=getattr(args, "dias_mora_max", None), **comunes)


def _imprimir_registros(registros: list):
    if not registros:
        print("⚠️ Sin registros para los filtros indicados.")
        return
    df = pd.DataFrame([r.to_dict() for r in registros])
    print(df.to_string(index=False))
    print(f"\nTotal: {len(registros)}")


def _imprimir_estadisticas(stats: dict):
    print(f"📦 Guías: {stats['totalGuias']}")
    print(f"🛢️ Litros retirados: {formatear_numero(stats['litrosRetirados'])} L")
    print(f"💰 Valor total: {formatear_moneda(stats['valorTotal'])}")
    print(f"📈 Eficiencia de retiro: {formatear_porcentaje(stats['eficienciaRetiro'])}")
    print(f"🧾 Facturas impagas: {stats['totalFacturasImpagas']} "
          f"({formatear_moneda(stats['montoTotalImpago'])})")
    v = stats["facturasVencidas"]
    print(f"   Críticas: {v['criticas']} | Altas: {v['altas']} | Medias: {v['medias']} | Bajas: {v['bajas']}")
    for t in stats["tendenciaMensual"]:
        print(f"   {t['mes']}: {t['cantidad']} guías, {formatear_numero(t['litros'])} L")


def main(argv=None, settings: Settings | None = None, transport=None) -> int:
    args = _parser().parse_args(argv)
    if not args.command:
        _parser().print_help()
        return 1

    settings = settings or Settings()
    almacen = AlmacenSesion(settings.SESSION_FILE)
    sesion = SesionPortal(construir_autenticador(settings, transport))

    try:
        if args.command == "login":
            resultado = sesion.iniciar(args.usuario, args.clave)
            almacen.guardar(resultado["token"], resultado["usuario"]["id"])
            print(f"✅ Bienvenido {resultado['usuario'].get('nombre') or args.usuario} "
                  f"- cliente {resultado['cliente'].get('nombre')} (vía {resultado['origen']})")
            return 0

        guardada = almacen.cargar()
        if not guardada:
            print("❌ No hay sesión iniciada. Use: login --usuario ... --clave ...")
            return 1
        try:
            sesion.restaurar(guardada[CLAVE_TOKEN])
        except SesionInvalida as e:
            almacen.limpiar()
            print(f"❌ Sesión inválida ({e}). Inicie sesión nuevamente.")
            return 1

        if args.command == "logout":
            sesion.cerrar()
            almacen.limpiar()
            print("👋 Sesión cerrada.")
            return 0

        if args.command == "me":
            datos = sesion.autenticador.sesion(sesion.token)
            print(f"👤 {datos['usuario'].get('nombre')} ({datos['usuario'].get('usu_login')})")
            print(f"🏢 {datos['cliente'].get('nombre')} [{datos['cliente'].get('id')}]")
            return 0

        resolvedor = construir_resolvedor(settings, transport)
        if args.refrescar:
            resolvedor.invalidar_cache()
        cliente_id = sesion.cliente_id

        if args.command == "guias":
            _imprimir_registros(resolvedor.resolver(cliente_id, TipoRegistro.GUIAS,
                                                    _filtros(TipoRegistro.GUIAS, args), sesion.token))
        elif args.command == "facturas":
            _imprimir_registros(resolvedor.resolver(cliente_id, TipoRegistro.FACTURAS,
                                                    _filtros(TipoRegistro.FACTURAS, args), sesion.token))
        elif args.command == "estadisticas":
            guias = resolvedor.resolver(cliente_id, TipoRegistro.GUIAS, token=sesion.token)
            facturas = resolvedor.resolver(cliente_id, TipoRegistro.FACTURAS, token=sesion.token)
            _imprimir_estadisticas(calcular_estadisticas(guias, facturas))
        elif args.command == "exportar":
            tipo = TipoRegistro(args.tipo)
            registros = resolvedor.resolver(cliente_id, tipo, _filtros(tipo, args), sesion.token)
            cliente = sesion.autenticador.sesion(sesion.token).get("cliente", {}).get("nombre") or f"Cliente {cliente_id}"
            archivo = ExportService().exportar(tipo, args.formato, registros, cliente)
            os.makedirs(args.salida, exist_ok=True)
            ruta = os.path.join(args.salida, archivo.nombre)
            with open(ruta, "wb") as f:
                f.write(archivo.contenido)
            print(f"📂 Archivo generado: {ruta}")
        elif args.command == "conexion":
            for clave, valor in resolvedor.info_conexion().items():
                print(f"{clave}: {valor}")
        return 0

    except (EntradaInvalida, CredencialesInvalidas) as e:
        print(f"❌ {e}")
        return 1
    except SesionInvalida as e:
        almacen.limpiar()
        print(f"❌ Sesión inválida ({e}). Inicie sesión nuevamente.")
        return 1
    except ViolacionSeguridad as e:
        print(f"🚨 ALERTA DE SEGURIDAD: {e}")
        return 2
    except FuenteNoDisponible as e:
        print(f"❌ Sin fuentes de datos disponibles: {e}")
        return 1
    except ErrorExportacion as e:
        print(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
