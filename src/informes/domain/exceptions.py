# informes/domain/exceptions.py

from authentication.domain.exceptions import EntradaInvalida


class ClienteInvalido(EntradaInvalida):
    """Id de cliente ausente o no entero positivo."""


class FuenteNoDisponible(Exception):
    """Una fuente de datos falló (red, timeout, HTTP no 2xx o payload mal formado)."""


class RegistroInvalido(ValueError):
    """Payload que no tiene la forma de una lista de registros."""


class ViolacionSeguridad(Exception):
    """Se detectaron registros de otro cliente después del filtrado."""

    def __init__(self, cliente_id: int, ajenos: set):
        self.cliente_id = cliente_id
        self.ajenos = ajenos
        super().__init__(
            f"Se detectaron datos de otros clientes ({sorted(ajenos)}) en la consulta del cliente {cliente_id}"
        )
