# informes/domain/entities.py

from datetime import date
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Numero = Union[int, float]


class TipoRegistro(str, Enum):
    GUIAS = "guias"
    FACTURAS = "facturas"


def calcular_estado_mora(dias_mora) -> str:
    """Clasifica la antigüedad de una factura impaga según sus días de mora."""
    dias = dias_mora or 0
    if dias >= 90:
        return "Crítica"
    if dias >= 60:
        return "Alta"
    if dias >= 30:
        return "Media"
    return "Baja"


def _solo_fecha(valor):
    # "2025-07-01T04:00:00.000Z" -> "2025-07-01"
    if isinstance(valor, str) and len(valor) > 10 and valor[10] in ("T", " "):
        return valor[:10]
    return valor


def _como_texto(valor):
    if isinstance(valor, (int, float)) and not isinstance(valor, bool):
        return str(valor)
    return valor


class Guia(BaseModel):
    """Guía de retiro de residuos (un retiro realizado en una sucursal del cliente)."""

    id: int
    guia: str
    fecha: date
    cliente_id: int = Field(alias="clienteId")
    sucursal: str = ""
    servicio: str = ""
    frecuencia: str = ""
    lts_limite: Numero = 0
    lts_retirados: Numero = 0
    valor_servicio: Numero = 0
    valor_lt_adic: Numero = 0
    patente: Optional[str] = None
    total: Numero = 0
    observaciones: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("fecha", mode="before")
    @classmethod
    def validar_fecha(cls, v):
        return _solo_fecha(v)

    @field_validator("guia", "patente", mode="before")
    @classmethod
    def validar_texto(cls, v):
        return _como_texto(v)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class FacturaImpaga(BaseModel):
    """Factura pendiente de pago. estado_mora siempre se deriva de dias_mora."""

    id: int
    fecha: date
    empresa: str = ""
    sucursal: str = ""
    rut: Optional[str] = None
    no_guia: Optional[str] = None
    dias_mora: int = 0
    nro_factura: Optional[str] = None
    fecha_factura: Optional[date] = None
    cliente_id: int = Field(alias="clienteId")
    monto_factura: Numero = 0
    estado_mora: Optional[str] = None
    observaciones: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("fecha", "fecha_factura", mode="before")
    @classmethod
    def validar_fechas(cls, v):
        return _solo_fecha(v)

    @field_validator("rut", "no_guia", "nro_factura", mode="before")
    @classmethod
    def validar_texto(cls, v):
        return _como_texto(v)

    @model_validator(mode="after")
    def derivar_campos(self):
        self.estado_mora = calcular_estado_mora(self.dias_mora)
        if self.fecha_factura is None:
            self.fecha_factura = self.fecha
        return self

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


MODELOS = {
    TipoRegistro.GUIAS: Guia,
    TipoRegistro.FACTURAS: FacturaImpaga,
}
