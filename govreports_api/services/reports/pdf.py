"""PDF rendering with reportlab; layouts are looked up by view name."""
import io
from datetime import datetime
from decimal import Decimal
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from govreports_api.common.errors import UnsupportedExportError
from govreports_api.services.reports.columns import column_letter

# view name -> layout
PDF_VIEWS = {
    "bir.1601c": "table",
    "bir.1604cf": "table",
    "bir.alphalist": "table",
    "bir.2316": "certificate",
    "sss.r3": "table",
    "sss.r5": "table",
    "sss.sbr": "table",
    "sss.ecl": "table",
    "philhealth.rf1": "table",
    "philhealth.er2": "table",
    "philhealth.mdr": "table",
    "pagibig.mcrf": "table",
    "pagibig.stl": "table",
    "pagibig.hdl": "table",
}


def _styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name="ReportTitle",
        parent=styles["Heading1"],
        fontSize=14,
        alignment=TA_CENTER,
        spaceAfter=6,
        textColor=colors.HexColor("#1a365d"),
    ))
    styles.add(ParagraphStyle(
        name="ReportSubtitle",
        parent=styles["Heading2"],
        fontSize=11,
        alignment=TA_CENTER,
        spaceAfter=4,
        textColor=colors.HexColor("#4a5568"),
    ))
    styles.add(ParagraphStyle(
        name="SectionHeader",
        parent=styles["Heading3"],
        fontSize=10,
        fontName="Helvetica-Bold",
        spaceBefore=10,
        spaceAfter=4,
        textColor=colors.HexColor("#2d3748"),
    ))
    styles.add(ParagraphStyle(
        name="Footer",
        parent=styles["Normal"],
        fontSize=7,
        alignment=TA_CENTER,
        textColor=colors.HexColor("#718096"),
    ))
    return styles


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return f"{value:,.2f}"
    if isinstance(value, float):
        return f"{value:,.2f}"
    return str(value)


def cell_style(font_size: int) -> ParagraphStyle:
    return ParagraphStyle(name="TableCell", fontName="Helvetica", fontSize=font_size, leading=font_size + 2)


def table_cell(value, style):
    """Amounts stay plain strings; free text becomes a Paragraph so it wraps inside the column."""
    if value is None or isinstance(value, (Decimal, float, int)):
        return _text(value)
    return Paragraph(escape(str(value)), style)


def _footer(styles):
    return [
        Spacer(1, 12),
        Paragraph(f"Generated on {datetime.now().strftime('%Y-%m-%d %H:%M')}", styles["Footer"]),
    ]


def _header(styles, company_name, title, period_label, id_line=None):
    elements = [
        Paragraph(escape(company_name), styles["ReportTitle"]),
        Paragraph(escape(title), styles["ReportSubtitle"]),
        Paragraph(period_label, styles["ReportSubtitle"]),
    ]
    if id_line:
        elements.append(Paragraph(escape(id_line), styles["Footer"]))
    elements.append(Spacer(1, 10))
    return elements


def render(generator, data, period) -> bytes:
    layout = PDF_VIEWS.get(generator.pdf_view)
    if layout == "table":
        return render_table(generator, data, period)
    if layout == "certificate":
        pages = [generator.certificate_sections(row) for row in data.rows]
        return render_certificates(
            generator.profile.name, generator.title, generator.period_label(period), pages
        )
    raise UnsupportedExportError(f"No PDF layout for view '{generator.pdf_view}'")


def render_table(generator, data, period) -> bytes:
    styles = _styles()
    headers = generator.excel_headers()
    ncols = len(headers)

    buffer = io.BytesIO()
    pagesize = landscape(A4)
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize,
        rightMargin=0.4 * inch,
        leftMargin=0.4 * inch,
        topMargin=0.4 * inch,
        bottomMargin=0.4 * inch,
        title=generator.title,
    )

    elements = _header(
        styles, generator.profile.name, generator.title, generator.period_label(period), generator.id_line()
    )

    font_size = 7 if ncols > 10 else 8
    body = cell_style(font_size)

    rows = [headers]
    for index, record in enumerate(data.rows, start=1):
        rows.append([table_cell(v, body) for v in generator.map_row(record, index)])

    totals = generator.excel_totals(data.totals)
    has_totals = totals is not None
    if has_totals:
        letters = {column_letter(i): i for i in range(ncols)}
        line = [""] * ncols
        line[0] = "TOTALS"
        for letter, value in totals.items():
            if letter in letters:
                line[letters[letter]] = _text(value)
        rows.append(line)

    col_width = (pagesize[0] - 0.8 * inch) / max(ncols, 1)
    table = Table(rows, colWidths=[col_width] * ncols, repeatRows=1)
    commands = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(f"#{generator.header_fill}")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.HexColor(f"#{generator.header_font_color}")),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("ALIGN", (0, 0), (-1, 0), "CENTER"),
        ("FONTSIZE", (0, 0), (-1, -1), font_size),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.gray),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]
    if has_totals:
        commands += [
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ("BACKGROUND", (0, -1), (-1, -1), colors.HexColor("#e2e8f0")),
        ]
    table.setStyle(TableStyle(commands))
    elements.append(table)
    elements += _footer(styles)

    doc.build(elements)
    return buffer.getvalue()


def render_certificates(company_name, title, period_label, pages) -> bytes:
    """
    One A4 portrait page per certificate. `pages` is a list of section
    lists; each section is (heading, [(label, value), ...]).
    """
    styles = _styles()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=0.6 * inch,
        leftMargin=0.6 * inch,
        topMargin=0.5 * inch,
        bottomMargin=0.5 * inch,
        title=title,
    )

    elements = []
    for page_no, sections in enumerate(pages):
        if page_no:
            elements.append(PageBreak())
        elements += _header(styles, company_name, title, period_label)
        for heading, pairs in sections:
            elements.append(Paragraph(escape(heading), styles["SectionHeader"]))
            table = Table([[label, _text(value)] for label, value in pairs], colWidths=[4.2 * inch, 2.6 * inch])
            table.setStyle(TableStyle([
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                ("LINEBELOW", (0, 0), (-1, -1), 0.25, colors.HexColor("#cbd5e0")),
                ("TOPPADDING", (0, 0), (-1, -1), 2),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
            ]))
            elements.append(table)
        elements += _footer(styles)

    if not elements:
        elements = _header(styles, company_name, title, period_label)
        elements.append(Paragraph("No records for this period.", styles["Footer"]))

    doc.build(elements)
    return buffer.getvalue()
