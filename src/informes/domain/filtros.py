# informes/domain/filtros.py
#
# Filtros opcionales de las tablas de guías y facturas. Se aplican siempre
# sobre registros ya normalizados, cualquiera sea la fuente que los entregó.

from dataclasses import dataclass
from datetime import date
from typing import Optional

from authentication.domain.exceptions import EntradaInvalida


def _a_fecha(valor, campo: str) -> Optional[date]:
    if valor is None or valor == "":
        return None
    if isinstance(valor, date):
        return valor
    try:
        return date.fromisoformat(str(valor)[:10])
    except ValueError:
        raise EntradaInvalida(f"Fecha inválida en '{campo}': {valor!r} (formato esperado AAAA-MM-DD)")


def _a_entero(valor, campo: str) -> Optional[int]:
    if valor is None or valor == "":
        return None
    try:
        return int(valor)
    except (TypeError, ValueError):
        raise EntradaInvalida(f"Valor numérico inválido en '{campo}': {valor!r}")


def _texto(valor) -> Optional[str]:
    if valor is None:
        return None
    valor = str(valor).strip()
    return valor or None


def _contiene(campo: Optional[str], buscado: str) -> bool:
    return buscado.lower() in (campo or "").lower()


def _igual(campo: Optional[str], buscado: str) -> bool:
    return (campo or "").lower() == buscado.lower()


def _en_rango(fecha: date, desde: Optional[date], hasta: Optional[date]) -> bool:
    if desde and fecha < desde:
        return False
    if hasta and fecha > hasta:
        return False
    return True


def _params(pares) -> dict:
    params = {}
    for nombre, valor in pares:
        if valor is None:
            continue
        params[nombre] = valor.isoformat() if isinstance(valor, date) else str(valor)
    return params


@dataclass
class FiltrosGuias:
    fecha_inicio: Optional[date] = None
    fecha_fin: Optional[date] = None
    servicio: Optional[str] = None
    frecuencia: Optional[str] = None
    sucursal: Optional[str] = None

    def __post_init__(self):
        self.fecha_inicio = _a_fecha(self.fecha_inicio, "fechaInicio")
        self.fecha_fin = _a_fecha(self.fecha_fin, "fechaFin")
        self.servicio = _texto(self.servicio)
        self.frecuencia = _texto(self.frecuencia)
        self.sucursal = _texto(self.sucursal)

    def aplicar(self, registros: list) -> list:
        resultado = []
        for g in registros:
            if not _en_rango(g.fecha, self.fecha_inicio, self.fecha_fin):
                continue
            if self.servicio and not _contiene(g.servicio, self.servicio):
                continue
            if self.frecuencia and not _igual(g.frecuencia, self.frecuencia):
                continue
            if self.sucursal and not _contiene(g.sucursal, self.sucursal):
                continue
            resultado.append(g)
        return resultado

    def como_query_params(self) -> dict:
        return _params([
            ("fechaInicio", self.fecha_inicio),
            ("fechaFin", self.fecha_fin),
            ("servicio", self.servicio),
            ("frecuencia", self.frecuencia),
            ("sucursal", self.sucursal),
        ])


@dataclass
class FiltrosFacturas:
    fecha_inicio: Optional[date] = None
    fecha_fin: Optional[date] = None
    sucursal: Optional[str] = None
    estado_mora: Optional[str] = None
    dias_mora_min: Optional[int] = None
    dias_mora_max: Optional[int] = None

    def __post_init__(self):
        self.fecha_inicio = _a_fecha(self.fecha_inicio, "fechaInicio")
        self.fecha_fin = _a_fecha(self.fecha_fin, "fechaFin")
        self.sucursal = _texto(self.sucursal)
        self.estado_mora = _texto(self.estado_mora)
        self.dias_mora_min = _a_entero(self.dias_mora_min, "diasMoraMin")
        self.dias_mora_max = _a_entero(self.dias_mora_max, "diasMoraMax")

    def aplicar(self, registros: list) -> list:
        resultado = []
        for f in registros:
            if not _en_rango(f.fecha, self.fecha_inicio, self.fecha_fin):
                continue
            if self.sucursal and not _contiene(f.sucursal, self.sucursal):
                continue
            if self.estado_mora and not _igual(f.estado_mora, self.estado_mora):
                continue
            if self.dias_mora_min is not None and f.dias_mora < self.dias_mora_min:
                continue
            if self.dias_mora_max is not None and f.dias_mora > self.dias_mora_max:
                continue
            resultado.append(f)
        return resultado

    def como_query_params(self) -> dict:
        return _params([
            ("fechaInicio", self.fecha_inicio),
            ("fechaFin", self.fecha_fin),
            ("sucursal", self.sucursal),
            ("estadoMora", self.estado_mora),
            ("diasMoraMin", self.dias_mora_min),
            ("diasMoraMax", self.dias_mora_max),
        ])
