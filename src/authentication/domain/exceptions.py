# authentication/domain/exceptions.py


class EntradaInvalida(ValueError):
    """Datos de entrada faltantes o mal formados (credenciales vacías, id de cliente, etc.)."""


class CredencialesInvalidas(Exception):
    """No existe un usuario activo que coincida con login y contraseña."""


class ClienteNoEncontrado(Exception):
    """El usuario autenticado apunta a un cliente que no existe (falla de integridad)."""


class SesionInvalida(Exception):
    """Token ausente, inválido o expirado."""
