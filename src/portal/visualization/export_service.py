# portal/visualization/export_service.py

from dataclasses import dataclass
from datetime import date
from io import BytesIO
from typing import Optional
from xml.sax.saxutils import escape

import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas as pdf_canvas
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from authentication.domain.exceptions import EntradaInvalida
from informes.domain.entities import TipoRegistro
from informes.domain.estadisticas_service import calcular_estadisticas
from portal.domain.exceptions import ExportacionVacia, ErrorExportacion
from portal.visualization.formatters import (
    formatear_fecha,
    formatear_moneda,
    formatear_numero,
    sanitizar_nombre_archivo,
)
from utils.logging_factory import get_logger

logger = get_logger("export_service")

MEDIA_TYPES = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
}

PREFIJOS = {
    TipoRegistro.GUIAS: "Guias_Retiro",
    TipoRegistro.FACTURAS: "Facturas_Impagas",
}

VERDE_LOGISAMB = colors.Color(34 / 255, 197 / 255, 94 / 255)

COLORES_MORA = {
    "Crítica": colors.Color(254 / 255, 226 / 255, 226 / 255),
    "Alta": colors.Color(255 / 255, 237 / 255, 213 / 255),
    "Media": colors.Color(254 / 255, 249 / 255, 195 / 255),
}

# (título, ancho, valor)
COLUMNAS_EXCEL = {
    TipoRegistro.GUIAS: [
        ("N° Guía", 12, lambda g: g.guia),
        ("Fecha", 12, lambda g: formatear_fecha(g.fecha)),
        ("Sucursal", 25, lambda g: g.sucursal),
        ("Servicio", 30, lambda g: g.servicio),
        ("Frecuencia", 12, lambda g: g.frecuencia),
        ("Lts Límite", 12, lambda g: formatear_numero(g.lts_limite)),
        ("Lts Retirados", 15, lambda g: formatear_numero(g.lts_retirados)),
        ("Valor Servicio", 15, lambda g: formatear_numero(g.valor_servicio)),
        ("Valor Lt Adicional", 18, lambda g: formatear_numero(g.valor_lt_adic)),
        ("Patente", 12, lambda g: g.patente or ""),
        ("Total", 15, lambda g: formatear_numero(g.total)),
        ("Observaciones", 20, lambda g: g.observaciones or "-"),
    ],
    TipoRegistro.FACTURAS: [
        ("Fecha", 12, lambda f: formatear_fecha(f.fecha)),
        ("Empresa", 15, lambda f: f.empresa),
        ("Sucursal", 25, lambda f: f.sucursal),
        ("RUT", 15, lambda f: f.rut or ""),
        ("N° Guía", 12, lambda f: f.no_guia or ""),
        ("Días Mora", 10, lambda f: f.dias_mora),
        ("N° Factura", 15, lambda f: f.nro_factura or ""),
        ("Fecha Factura", 15, lambda f: formatear_fecha(f.fecha_factura)),
        ("Monto Factura", 18, lambda f: formatear_numero(f.monto_factura)),
        ("Estado Mora", 12, lambda f: f.estado_mora),
        ("Observaciones", 25, lambda f: f.observaciones or "-"),
    ],
}

COLUMNAS_PDF = {
    TipoRegistro.GUIAS: [
        ("N° Guía", 1.8, lambda g: g.guia),
        ("Fecha", 2.0, lambda g: formatear_fecha(g.fecha)),
        ("Sucursal", 4.2, lambda g: g.sucursal),
        ("Servicio", 4.2, lambda g: g.servicio),
        ("Frecuencia", 2.0, lambda g: g.frecuencia),
        ("Lts Límite", 1.9, lambda g: formatear_numero(g.lts_limite)),
        ("Lts Retirados", 2.1, lambda g: formatear_numero(g.lts_retirados)),
        ("Valor Servicio", 2.3, lambda g: formatear_moneda(g.valor_servicio)),
        ("Valor Lt Adic.", 2.1, lambda g: formatear_moneda(g.valor_lt_adic)),
        ("Patente", 1.8, lambda g: g.patente or ""),
        ("Total", 2.3, lambda g: formatear_moneda(g.total)),
    ],
    TipoRegistro.FACTURAS: [
        ("Fecha", 2.0, lambda f: formatear_fecha(f.fecha)),
        ("Empresa", 2.4, lambda f: f.empresa),
        ("Sucursal", 4.6, lambda f: f.sucursal),
        ("RUT", 2.4, lambda f: f.rut or ""),
        ("N° Guía", 1.9, lambda f: f.no_guia or ""),
        ("Días Mora", 1.7, lambda f: str(f.dias_mora)),
        ("N° Factura", 2.0, lambda f: f.nro_factura or ""),
        ("Fecha Factura", 2.3, lambda f: formatear_fecha(f.fecha_factura)),
        ("Monto", 2.6, lambda f: formatear_moneda(f.monto_factura)),
        ("Estado", 1.8, lambda f: f.estado_mora),
    ],
}

TITULOS = {
    TipoRegistro.GUIAS: "Reporte de Guías de Retiro",
    TipoRegistro.FACTURAS: "Reporte de Facturas Impagas",
}


@dataclass
class ArchivoExportado:
    nombre: str
    contenido: bytes
    media_type: str


def nombre_archivo(tipo: TipoRegistro, cliente_nombre: str, extension: str, hoy: Optional[date] = None) -> str:
    hoy = hoy or date.today()
    cliente = sanitizar_nombre_archivo(cliente_nombre) or "cliente"
    return f"{PREFIJOS[tipo]}_{cliente}_{hoy.isoformat()}.{extension}"


def nombre_hoja(tipo: TipoRegistro, cliente_nombre: str) -> str:
    base = "Guías" if tipo == TipoRegistro.GUIAS else "Facturas"
    nombre = f"{base} {cliente_nombre}".strip()
    # Excel no admite estos caracteres en nombres de hoja
    for c in "[]:*?/\\":
        nombre = nombre.replace(c, " ")
    return nombre[:31]


def _resumen(tipo: TipoRegistro, registros: list) -> list[str]:
    if tipo == TipoRegistro.GUIAS:
        stats = calcular_estadisticas(registros, [])
        return [
            f"Total Litros Retirados: {formatear_numero(stats['litrosRetirados'])} L",
            f"Total Facturado: {formatear_moneda(stats['valorTotal'])}",
        ]
    stats = calcular_estadisticas([], registros)
    vencidas = stats["facturasVencidas"]
    return [
        f"Monto Total Impago: {formatear_moneda(stats['montoTotalImpago'])}",
        f"Promedio Días de Mora: {round(stats['promedioMoraCliente'])} días",
        f"Críticas (90+ días): {vencidas['criticas']}",
        f"Altas (60-89 días): {vencidas['altas']}",
        f"Medias (30-59 días): {vencidas['medias']}",
        f"Bajas (0-29 días): {vencidas['bajas']}",
    ]


class ExportService:

    def exportar(self, tipo, formato: str, registros: list, cliente_nombre: str,
                 hoy: Optional[date] = None) -> ArchivoExportado:
        tipo = TipoRegistro(tipo)
        formato = (formato or "").lower()
        if formato not in MEDIA_TYPES:
            raise EntradaInvalida(f"Formato no soportado: {formato}")
        if not registros:
            raise ExportacionVacia("No hay datos para exportar")

        hoy = hoy or date.today()
        if formato == "xlsx":
            contenido = self.exportar_excel(tipo, registros, cliente_nombre)
        else:
            contenido = self.exportar_pdf(tipo, registros, cliente_nombre, hoy)

        nombre = nombre_archivo(tipo, cliente_nombre, formato, hoy)
        logger.info(f"✅ Archivo exportado: {nombre} ({len(registros)} registros)")
        return ArchivoExportado(nombre=nombre, contenido=contenido, media_type=MEDIA_TYPES[formato])

    # ------------------------------------------------------------------
    # Excel
    # ------------------------------------------------------------------
    def exportar_excel(self, tipo: TipoRegistro, registros: list, cliente_nombre: str) -> bytes:
        columnas = COLUMNAS_EXCEL[tipo]
        filas = []
        for i, r in enumerate(registros, start=1):
            fila = {"#": i}
            for titulo, _, valor in columnas:
                fila[titulo] = valor(r)
            filas.append(fila)
        df = pd.DataFrame(filas, columns=["#"] + [c[0] for c in columnas])

        hoja = nombre_hoja(tipo, cliente_nombre)
        buffer = BytesIO()
        try:
            with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
                df.to_excel(writer, sheet_name=hoja, index=False)
                ws = writer.sheets[hoja]

                relleno = PatternFill(start_color="22C55E", end_color="22C55E", fill_type="solid")
                fuente = Font(bold=True, color="FFFFFF")
                for celda in ws[1]:
                    celda.fill = relleno
                    celda.font = fuente
                    celda.alignment = Alignment(horizontal="center", vertical="center")

                anchos = [5] + [c[1] for c in columnas]
                for idx, ancho in enumerate(anchos, start=1):
                    ws.column_dimensions[get_column_letter(idx)].width = ancho
                ws.freeze_panes = "A2"
        except Exception as e:
            logger.error(f"❌ Error al generar Excel: {e}")
            raise ErrorExportacion("Error al exportar a Excel. Intente exportar a PDF como alternativa.") from e
        return buffer.getvalue()

    # ------------------------------------------------------------------
    # PDF
    # ------------------------------------------------------------------
    def exportar_pdf(self, tipo: TipoRegistro, registros: list, cliente_nombre: str, hoy: date) -> bytes:
        try:
            return self.pdf_tabla(tipo, registros, cliente_nombre, hoy)
        except Exception as e:
            logger.warning(f"⚠️ Error generando PDF con tabla, se intenta versión simple: {e}")
        try:
            return self.pdf_simple(tipo, registros, cliente_nombre, hoy)
        except Exception as e:
            logger.error(f"❌ Falló también el PDF simplificado: {e}")
            raise ErrorExportacion("Error al exportar a PDF. Intente exportar a Excel como alternativa.") from e

    def pdf_tabla(self, tipo: TipoRegistro, registros: list, cliente_nombre: str, hoy: date) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer, pagesize=landscape(A4),
            rightMargin=1.0 * cm, leftMargin=1.0 * cm,
            topMargin=1.0 * cm, bottomMargin=1.5 * cm,
            title=TITULOS[tipo], author="LOGISAMB",
        )

        styles = getSampleStyleSheet()
        styles.add(ParagraphStyle(name="Small", fontSize=7, leading=8.5))
        styles.add(ParagraphStyle(name="Banda", fontSize=16, leading=20, textColor=colors.white,
                                  fontName="Helvetica-Bold"))
        small_style = styles["Small"]

        story = []

        banda = Table(
            [[Paragraph("LOGISAMB - Sistema de Gestión Integral de Residuos", styles["Banda"])]],
            colWidths=[doc.width],
        )
        banda.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), VERDE_LOGISAMB),
            ("TOPPADDING", (0, 0), (-1, -1), 8),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
        ]))
        story.append(banda)
        story.append(Spacer(1, 0.4 * cm))

        story.append(Paragraph(f"Cliente: {escape(cliente_nombre)}", styles["Heading2"]))
        story.append(Paragraph(TITULOS[tipo], styles["Normal"]))
        story.append(Paragraph(f"Fecha: {formatear_fecha(hoy)}", styles["Normal"]))
        story.append(Paragraph(f"Total registros: {len(registros)}", styles["Normal"]))
        story.append(Spacer(1, 0.4 * cm))

        columnas = COLUMNAS_PDF[tipo]
        filas_tabla = [[c[0] for c in columnas]]
        for r in registros:
            filas_tabla.append([Paragraph(escape(str(valor(r))), small_style) for _, _, valor in columnas])

        tabla = Table(filas_tabla, repeatRows=1, colWidths=[c[1] * cm for c in columnas])
        estilo = [
            ("FONTSIZE", (0, 0), (-1, -1), 7),
            ("BACKGROUND", (0, 0), (-1, 0), VERDE_LOGISAMB),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("BOTTOMPADDING", (0, 0), (-1, 0), 5),
            ("TOPPADDING", (0, 0), (-1, 0), 5),
        ]
        if tipo == TipoRegistro.FACTURAS:
            for i, f in enumerate(registros, start=1):
                color = COLORES_MORA.get(f.estado_mora)
                if color is not None:
                    estilo.append(("BACKGROUND", (0, i), (-1, i), color))
        tabla.setStyle(TableStyle(estilo))
        story.append(tabla)

        story.append(Spacer(1, 0.5 * cm))
        story.append(Paragraph("Resumen:", styles["Heading3"]))
        for linea in _resumen(tipo, registros):
            story.append(Paragraph(escape(linea), styles["Normal"]))

        def pie_pagina(canvas, documento):
            canvas.saveState()
            canvas.setFont("Helvetica", 8)
            canvas.setFillColor(colors.grey)
            canvas.drawCentredString(
                documento.pagesize[0] / 2, 0.8 * cm,
                f"Página {documento.page} - Portal LOGISAMB",
            )
            canvas.restoreState()

        doc.build(story, onFirstPage=pie_pagina, onLaterPages=pie_pagina)
        return buffer.getvalue()

    def pdf_simple(self, tipo: TipoRegistro, registros: list, cliente_nombre: str, hoy: date) -> bytes:
        """Texto plano, un registro por línea. Respaldo cuando la tabla no se puede generar."""
        buffer = BytesIO()
        ancho, alto = landscape(A4)
        c = pdf_canvas.Canvas(buffer, pagesize=(ancho, alto))

        def encabezado():
            c.setFont("Helvetica-Bold", 14)
            c.drawString(2 * cm, alto - 2 * cm, "LOGISAMB - Portal de Clientes")
            c.setFont("Helvetica", 10)
            c.drawString(2 * cm, alto - 2.7 * cm, f"Cliente: {cliente_nombre}")
            c.drawString(2 * cm, alto - 3.2 * cm, f"{TITULOS[tipo]} - Fecha: {formatear_fecha(hoy)}")
            c.drawString(2 * cm, alto - 3.7 * cm, f"Total registros: {len(registros)}")
            c.setFont("Helvetica", 8)
            return alto - 4.7 * cm

        y = encabezado()
        for i, r in enumerate(registros, start=1):
            if tipo == TipoRegistro.GUIAS:
                linea = (f"{i}. Guía {r.guia} | {formatear_fecha(r.fecha)} | {r.sucursal} | "
                         f"{formatear_numero(r.lts_retirados)} L | {formatear_moneda(r.total)}")
            else:
                linea = (f"{i}. Factura {r.nro_factura} | {formatear_fecha(r.fecha)} | {r.sucursal} | "
                         f"{r.dias_mora} días | {formatear_moneda(r.monto_factura)} | {r.estado_mora}")
            c.drawString(2 * cm, y, linea[:160])
            y -= 0.5 * cm
            if y < 2 * cm:
                c.showPage()
                y = encabezado()

        y -= 0.3 * cm
        c.setFont("Helvetica-Bold", 10)
        for linea in _resumen(tipo, registros):
            if y < 2 * cm:
                c.showPage()
                y = encabezado()
                c.setFont("Helvetica-Bold", 10)
            c.drawString(2 * cm, y, linea)
            y -= 0.5 * cm

        c.save()
        return buffer.getvalue()
