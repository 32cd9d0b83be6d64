# portal/domain/exceptions.py

from authentication.domain.exceptions import EntradaInvalida


class ExportacionVacia(EntradaInvalida):
    """No hay registros para exportar."""


class ErrorExportacion(Exception):
    """Falló la exportación y también su formato simplificado de respaldo."""
