"""
Output encoders. Each takes a generator (for headers, row mapping and
layout hooks) plus its ReportData and returns the raw bytes.
"""
import csv
import io
from datetime import date
from decimal import Decimal

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from govreports_api.common.errors import InvalidArgumentError
from govreports_api.services.reports.columns import column_letter

CRLF = "\r\n"
MONEY_FORMAT = "#,##0.00"

THIN = Side(style="thin")
DOUBLE = Side(style="double")
HEADER_BORDER = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)
TOTALS_BORDER = Border(top=DOUBLE)


def _cell_value(value):
    if isinstance(value, Decimal):
        return float(value)
    return value


def write_cell(ws, ref, value, bold=False):
    cell = ws[ref]
    cell.value = _cell_value(value)
    if isinstance(value, Decimal):
        cell.number_format = MONEY_FORMAT
    if bold:
        cell.font = Font(bold=True)
    return cell


def autosize_columns(ws, column_count, first_row):
    for idx in range(column_count):
        letter = column_letter(idx)
        width = 10
        for (cell,) in ws.iter_rows(min_row=first_row, min_col=idx + 1, max_col=idx + 1):
            if cell.value is None:
                continue
            text = f"{cell.value:,.2f}" if isinstance(cell.value, float) else str(cell.value)
            width = max(width, len(text) + 2)
        ws.column_dimensions[letter].width = min(width, 60)


def to_excel(generator, data, period) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = generator.sheet_title[:31]

    ws["A1"] = generator.profile.name
    ws["A1"].font = Font(bold=True, size=14)
    write_cell(ws, "A2", generator.title, bold=True)
    write_cell(ws, "A3", generator.period_label(period), bold=True)

    header_row = 5
    id_line = generator.id_line()
    if id_line:
        write_cell(ws, "A4", id_line, bold=True)
        header_row = 6

    headers = generator.excel_headers()
    fill = PatternFill(start_color=generator.header_fill, end_color=generator.header_fill, fill_type="solid")
    header_font = Font(bold=True, color=generator.header_font_color)
    for idx, title in enumerate(headers):
        cell = ws[f"{column_letter(idx)}{header_row}"]
        cell.value = title
        cell.font = header_font
        cell.fill = fill
        cell.border = HEADER_BORDER
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

    row = header_row + 1
    for index, record in enumerate(data.rows, start=1):
        for idx, value in enumerate(generator.map_row(record, index)):
            write_cell(ws, f"{column_letter(idx)}{row}", value)
        row += 1

    last_col = max(len(headers), 1)
    totals = generator.excel_totals(data.totals)
    if totals is not None:
        ws[f"A{row}"] = "TOTALS"
        for letter, value in totals.items():
            write_cell(ws, f"{letter}{row}", value)
        for idx in range(last_col):
            cell = ws[f"{column_letter(idx)}{row}"]
            cell.font = Font(bold=True)
            cell.border = TOTALS_BORDER
        generator.decorate_sheet(ws, data.totals, row)

    autosize_columns(ws, last_col, header_row)

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def _csv_value(value):
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, date):
        return value.isoformat()
    return "" if value is None else value


def to_csv(generator, data) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(generator.excel_headers())
    for index, record in enumerate(data.rows, start=1):
        writer.writerow([_csv_value(v) for v in generator.map_row(record, index)])
    return buf.getvalue().encode("utf-8")


def to_dat(generator, data, period) -> bytes:
    """Pipe-delimited eFiling file: optional H record, details, optional C record."""
    lines = []
    header = generator.dat_header(period)
    if header:
        lines.append(header)
    lines.extend(generator.map_row_to_dat(record) for record in data.rows)
    footer = generator.dat_footer(data.totals, period)
    if footer:
        lines.append(footer)
    return CRLF.join(lines).encode("utf-8")


def pad(value, width, fill=" ", align="left") -> str:
    """Fit text into exactly `width` characters, truncating if longer."""
    text = str(value or "")[:width]
    return text.ljust(width, fill) if align == "left" else text.rjust(width, fill)


def pad_amount(value, width) -> str:
    """Right-aligned, zero-filled number; a value wider than the field is an error, not truncated."""
    text = str(value)
    if len(text) > width:
        raise InvalidArgumentError(
            f"Amount {text} does not fit a {width}-digit field", payload={"value": text, "width": width}
        )
    return text.rjust(width, "0")


def to_fixed_width(generator, data) -> bytes:
    lines = [generator.map_row_to_fixed_width(record) for record in data.rows]
    return CRLF.join(lines).encode("utf-8")
