# informes/domain/estadisticas_service.py

from collections import defaultdict
from datetime import date
from typing import Optional

from informes.domain.entities import calcular_estado_mora

MESES_CORTOS = ["ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"]

_BUCKETS_MORA = {
    "Crítica": "criticas",
    "Alta": "altas",
    "Media": "medias",
    "Baja": "bajas",
}


def _mes_anterior(hoy: date) -> tuple[int, int]:
    if hoy.month == 1:
        return hoy.year - 1, 12
    return hoy.year, hoy.month - 1


def _bucket_mes(guias: list, anio: int, mes: int) -> dict:
    del_mes = [g for g in guias if g.fecha.year == anio and g.fecha.month == mes]
    return {
        "mes": MESES_CORTOS[mes - 1],
        "cantidad": len(del_mes),
        "litros": sum(g.lts_retirados for g in del_mes),
        "valor": sum(g.total for g in del_mes),
    }


def _agrupar_guias(guias: list):
    por_servicio = defaultdict(lambda: {"cantidad": 0, "litros": 0})
    por_sucursal = defaultdict(lambda: {"cantidad": 0, "litros": 0, "valor": 0})
    por_frecuencia = defaultdict(int)

    for g in guias:
        s = por_servicio[g.servicio]
        s["cantidad"] += 1
        s["litros"] += g.lts_retirados

        su = por_sucursal[g.sucursal]
        su["cantidad"] += 1
        su["litros"] += g.lts_retirados
        su["valor"] += g.total

        por_frecuencia[g.frecuencia] += 1

    guias_por_servicio = sorted(
        ({"servicio": k, **v} for k, v in por_servicio.items()),
        key=lambda x: x["cantidad"], reverse=True,
    )
    guias_por_sucursal = sorted(
        ({"sucursal": k, **v} for k, v in por_sucursal.items()),
        key=lambda x: x["valor"], reverse=True,
    )
    guias_por_frecuencia = sorted(
        ({"frecuencia": k, "cantidad": v} for k, v in por_frecuencia.items()),
        key=lambda x: x["cantidad"], reverse=True,
    )
    return guias_por_servicio, guias_por_sucursal, guias_por_frecuencia


def calcular_estadisticas(guias: list, facturas: list, hoy: Optional[date] = None) -> dict:
    """
    Resumen del cliente a partir de sus guías y facturas impagas ya resueltas.

    Función pura: no filtra por cliente ni consulta fuentes. Con listas vacías
    todos los campos numéricos son 0 y las agrupaciones quedan vacías (la
    tendencia mensual mantiene sus dos meses, en cero).
    """
    hoy = hoy or date.today()

    total_guias = len(guias)
    litros = sum(g.lts_retirados for g in guias)
    valor_total = sum(g.total for g in guias)
    limite_total = sum(g.lts_limite for g in guias)

    promedio_litros = litros / total_guias if total_guias else 0
    eficiencia = (litros / limite_total) * 100 if limite_total else 0

    por_servicio, por_sucursal, por_frecuencia = _agrupar_guias(guias)

    anio_ant, mes_ant = _mes_anterior(hoy)
    tendencia = [
        _bucket_mes(guias, anio_ant, mes_ant),
        _bucket_mes(guias, hoy.year, hoy.month),
    ]

    total_facturas = len(facturas)
    monto_impago = sum(f.monto_factura for f in facturas)
    promedio_mora = sum(f.dias_mora for f in facturas) / total_facturas if total_facturas else 0

    vencidas = {"criticas": 0, "altas": 0, "medias": 0, "bajas": 0}
    for f in facturas:
        vencidas[_BUCKETS_MORA[calcular_estado_mora(f.dias_mora)]] += 1

    return {
        "totalGuias": total_guias,
        "litrosRetirados": litros,
        "valorTotal": valor_total,
        "promedioLitrosPorGuia": promedio_litros,
        "guiasPorServicio": por_servicio,
        "guiasPorSucursal": por_sucursal,
        "guiasPorFrecuencia": por_frecuencia,
        "tendenciaMensual": tendencia,
        "eficienciaRetiro": eficiencia,
        "totalFacturasImpagas": total_facturas,
        "montoTotalImpago": monto_impago,
        "promedioMoraCliente": promedio_mora,
        "facturasVencidas": vencidas,
    }
