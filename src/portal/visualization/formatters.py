# portal/visualization/formatters.py
#
# Formato es-CL: punto como separador de miles, coma decimal, fechas dd-mm-aaaa.

import re
from datetime import date, datetime


def _intercambiar_separadores(texto: str) -> str:
    return texto.replace(",", "X").replace(".", ",").replace("X", ".")


def formatear_numero(valor) -> str:
    if valor is None:
        return "0"
    if float(valor).is_integer():
        return _intercambiar_separadores(format(int(valor), ","))
    texto = format(float(valor), ",.2f").rstrip("0").rstrip(".")
    return _intercambiar_separadores(texto)


def formatear_moneda(valor) -> str:
    """Pesos chilenos sin decimales: 88299 -> '$88.299'."""
    monto = round(float(valor or 0))
    signo = "-" if monto < 0 else ""
    return f"{signo}${_intercambiar_separadores(format(abs(monto), ','))}"


def formatear_fecha(valor) -> str:
    if valor is None or valor == "":
        return ""
    if isinstance(valor, str):
        try:
            valor = date.fromisoformat(valor[:10])
        except ValueError:
            return valor
    if isinstance(valor, datetime):
        valor = valor.date()
    return valor.strftime("%d-%m-%Y")


def formatear_porcentaje(valor) -> str:
    return _intercambiar_separadores(format(float(valor or 0), ",.1f")) + "%"


def sanitizar_nombre_archivo(nombre: str) -> str:
    limpio = re.sub(r"[^A-Za-z0-9_\-.]", "_", nombre or "")
    limpio = re.sub(r"_+", "_", limpio)
    return limpio.strip("_")
