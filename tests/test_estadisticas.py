# tests/test_estadisticas.py

from datetime import date

import pytest

from informes.domain.entities import Guia, FacturaImpaga, TipoRegistro
from informes.domain.estadisticas_service import calcular_estadisticas
from informes.domain.normalizacion import normalizar
from informes.infrastructure import datos_embebidos


def _guia(id_, fecha, litros=1000, limite=2000, total=100, sucursal="S1", servicio="RETIRO", frecuencia="MENSUAL"):
    return Guia(
        id=id_, guia=str(id_), fecha=fecha, cliente_id=57, sucursal=sucursal, servicio=servicio,
        frecuencia=frecuencia, lts_retirados=litros, lts_limite=limite, total=total,
    )


def _factura(id_, dias, monto=1000):
    return FacturaImpaga(id=id_, fecha="2025-06-01", cliente_id=57, dias_mora=dias, monto_factura=monto)


def test_sin_datos_todo_en_cero():
    stats = calcular_estadisticas([], [], hoy=date(2025, 7, 15))

    assert stats["totalGuias"] == 0
    assert stats["litrosRetirados"] == 0
    assert stats["valorTotal"] == 0
    assert stats["promedioLitrosPorGuia"] == 0
    assert stats["eficienciaRetiro"] == 0
    assert stats["promedioMoraCliente"] == 0
    assert stats["guiasPorServicio"] == []
    assert stats["guiasPorSucursal"] == []
    assert stats["facturasVencidas"] == {"criticas": 0, "altas": 0, "medias": 0, "bajas": 0}
    assert stats["tendenciaMensual"] == [
        {"mes": "jun", "cantidad": 0, "litros": 0, "valor": 0},
        {"mes": "jul", "cantidad": 0, "litros": 0, "valor": 0},
    ]


def test_totales_y_promedios():
    guias = [
        _guia(1, "2025-07-01", litros=1000, limite=1000, total=100),
        _guia(2, "2025-07-02", litros=2000, limite=1000, total=200),
        _guia(3, "2025-07-03", litros=3000, limite=2000, total=300),
    ]
    stats = calcular_estadisticas(guias, [], hoy=date(2025, 7, 15))

    assert stats["totalGuias"] == 3
    assert stats["valorTotal"] == 600
    assert stats["litrosRetirados"] == 6000
    assert stats["promedioLitrosPorGuia"] == pytest.approx(2000)
    assert stats["eficienciaRetiro"] == pytest.approx(150.0)


def test_agrupaciones_ordenadas():
    guias = [
        _guia(1, "2025-07-01", total=100, sucursal="A", servicio="X", frecuencia="MENSUAL"),
        _guia(2, "2025-07-01", total=500, sucursal="B", servicio="Y", frecuencia="SEMANAL"),
        _guia(3, "2025-07-01", total=100, sucursal="A", servicio="Y", frecuencia="SEMANAL"),
    ]
    stats = calcular_estadisticas(guias, [], hoy=date(2025, 7, 15))

    assert stats["guiasPorServicio"][0] == {"servicio": "Y", "cantidad": 2, "litros": 2000}
    assert [s["sucursal"] for s in stats["guiasPorSucursal"]] == ["B", "A"]
    assert stats["guiasPorSucursal"][1]["valor"] == 200
    assert stats["guiasPorFrecuencia"][0] == {"frecuencia": "SEMANAL", "cantidad": 2}


def test_buckets_de_mora_en_los_limites():
    facturas = [_factura(i, d) for i, d in enumerate([29, 30, 59, 60, 89, 90], start=1)]
    stats = calcular_estadisticas([], facturas, hoy=date(2025, 7, 15))

    assert stats["facturasVencidas"] == {"criticas": 1, "altas": 2, "medias": 2, "bajas": 1}
    assert stats["totalFacturasImpagas"] == 6
    assert stats["montoTotalImpago"] == 6000
    assert stats["promedioMoraCliente"] == pytest.approx(sum([29, 30, 59, 60, 89, 90]) / 6)


def test_tendencia_mensual_mes_anterior_y_actual():
    guias = [
        _guia(1, "2025-06-10", litros=500, total=10),
        _guia(2, "2025-07-01", litros=700, total=20),
        _guia(3, "2025-07-20", litros=800, total=30),
        _guia(4, "2025-05-01", litros=999, total=99),  # fuera de la ventana
    ]
    stats = calcular_estadisticas(guias, [], hoy=date(2025, 7, 31))

    assert stats["tendenciaMensual"] == [
        {"mes": "jun", "cantidad": 1, "litros": 500, "valor": 10},
        {"mes": "jul", "cantidad": 2, "litros": 1500, "valor": 50},
    ]


def test_tendencia_cruza_el_anio():
    guias = [_guia(1, "2024-12-28"), _guia(2, "2025-01-03")]
    stats = calcular_estadisticas(guias, [], hoy=date(2025, 1, 10))
    assert [(b["mes"], b["cantidad"]) for b in stats["tendenciaMensual"]] == [("dic", 1), ("ene", 1)]


def test_datos_embebidos_copec():
    guias = normalizar(TipoRegistro.GUIAS, [g for g in datos_embebidos.GUIAS if g["clienteId"] == 57])
    facturas = normalizar(
        TipoRegistro.FACTURAS, [f for f in datos_embebidos.FACTURAS_IMPAGAS if f["clienteId"] == 57]
    )
    stats = calcular_estadisticas(guias, facturas, hoy=date(2025, 7, 15))

    assert stats["totalGuias"] == 15
    assert stats["totalFacturasImpagas"] == 7
    assert stats["facturasVencidas"] == {"criticas": 0, "altas": 1, "medias": 3, "bajas": 3}
    assert stats["tendenciaMensual"][1]["cantidad"] == 15
