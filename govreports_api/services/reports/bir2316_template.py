"""
Fill the official BIR Form 2316 spreadsheet.

Values are written into fixed cells of the template workbook. Each
written cell also gets a white solid fill so the value stays readable
over the template's shaded input boxes. Batch output is one worksheet
per employee, each a fresh copy of the untouched template sheet.
"""
import io
import logging
import os
import re
from decimal import Decimal
from types import MappingProxyType

from openpyxl import load_workbook
from openpyxl.styles import PatternFill

from govreports_api.common.errors import NoDataError, TemplateNotFoundError
from govreports_api.services.reports import pdf
from govreports_api.services.reports.columns import digits_only, format_date, format_tin, money
from govreports_api.services.reports.context import CONTENT_TYPES, ReportFile

log = logging.getLogger(__name__)

WHITE_FILL = PatternFill(fill_type="solid", start_color="FFFFFFFF", end_color="FFFFFFFF")

PART_IV_A_COLUMN = "M"
PART_IV_B_COLUMN = "AH"

# item number -> template row
PART_IV_A_ROWS = MappingProxyType({
    19: 61, 20: 63, 21: 65, 22: 67, 23: 69,
    24: 71, 25: 73, 26: 77, 27: 79, 28: 80,
})

PART_IV_B_ROWS = MappingProxyType({
    29: 16, 30: 18, 31: 20, 32: 23, 33: 26, 34: 28, 35: 30, 36: 33,
    37: 36, 38: 39, 39: 43, 40: 45, 41: 47, 42: 50, 43: 52, 44: 54,
    45: 60, 46: 62, 47: 64, 48: 66, 49: 68, 50: 70, 51: 72, 52: 77,
})

PART_IV_A_LABELS = MappingProxyType({
    19: "Gross Compensation Income from Present Employer",
    20: "Less: Total Non-Taxable/Exempt Compensation",
    21: "Taxable Compensation Income from Present Employer",
    22: "Add: Taxable Compensation Income from Previous Employer",
    23: "Gross Taxable Compensation Income",
    24: "Tax Due",
    25: "Amount of Taxes Withheld (Present Employer)",
    26: "Total Amount of Taxes Withheld as Adjusted",
    27: "5% Tax Credit (PERA Act of 2008)",
    28: "Total Taxes Withheld",
})

PART_IV_B_LABELS = MappingProxyType({
    29: "Basic Salary (MWE / exempt)",
    30: "Holiday Pay (MWE)",
    31: "Overtime Pay (MWE)",
    32: "Night Shift Differential (MWE)",
    33: "Hazard Pay (MWE)",
    34: "13th Month Pay and Other Benefits",
    35: "De Minimis Benefits",
    36: "SSS, GSIS, PHIC and Pag-IBIG Contributions",
    37: "Salaries and Other Forms of Compensation",
    38: "Total Non-Taxable/Exempt Compensation",
    39: "Basic Salary",
    40: "Representation",
    41: "Transportation",
    42: "Cost of Living Allowance",
    43: "Fixed Housing Allowance",
    44: "Others",
    45: "Commission",
    46: "Profit Sharing",
    47: "Fees Including Director's Fees",
    48: "Taxable 13th Month Benefits",
    49: "Hazard Pay",
    50: "Overtime Pay",
    51: "Others (Supplementary)",
    52: "Total Taxable Compensation Income",
})


def _check_items(name, mapping, items):
    missing = set(items) - set(mapping)
    extra = set(mapping) - set(items)
    if missing or extra:
        raise RuntimeError(f"{name} is incomplete: missing={sorted(missing)} extra={sorted(extra)}")


_check_items("PART_IV_A_ROWS", PART_IV_A_ROWS, range(19, 29))
_check_items("PART_IV_B_ROWS", PART_IV_B_ROWS, range(29, 53))
_check_items("PART_IV_A_LABELS", PART_IV_A_LABELS, range(19, 29))
_check_items("PART_IV_B_LABELS", PART_IV_B_LABELS, range(29, 53))

_SHEET_UNSAFE = re.compile(r"[\\/?*\[\]:]+")


def sheet_title(last_name, first_name, taken=()) -> str:
    """'Last_First', stripped of characters Excel rejects, unique and at most 31 chars."""
    base = _SHEET_UNSAFE.sub("_", f"{last_name or ''}_{first_name or ''}")[:31] or "Employee"
    title, n = base, 2
    while title in taken:
        suffix = f"_{n}"
        title = base[: 31 - len(suffix)] + suffix
        n += 1
    return title


def _amount(data, key):
    return money(data.get(key) or 0)


def part_iv_a_values(data: dict) -> dict:
    taxable = _amount(data, "taxable_compensation")
    previous = _amount(data, "previous_employer_income")
    withheld = _amount(data, "withholding_tax")
    pera = _amount(data, "pera_tax_credit")
    return {
        19: _amount(data, "gross_compensation"),
        20: _amount(data, "total_non_taxable"),
        21: taxable,
        22: previous,
        23: taxable + previous,
        24: money(data.get("tax_due", withheld)),
        25: withheld,
        26: withheld,
        27: pera,
        28: withheld + pera,
    }


def part_iv_b_values(data: dict) -> dict:
    """Items with no source in the payroll data are left blank."""
    thirteenth = _amount(data, "thirteenth_month_pay")
    exempt_13th = _amount(data, "non_taxable_13th_month")
    contributions = _amount(data, "total_contributions")
    values = {
        34: exempt_13th,
        35: _amount(data, "de_minimis"),
        38: _amount(data, "total_non_taxable"),
        39: _amount(data, "basic_salary"),
        50: _amount(data, "overtime_pay"),
        52: _amount(data, "taxable_compensation"),
    }
    if contributions > 0:
        values[36] = contributions
    if thirteenth > exempt_13th:
        values[48] = thirteenth - exempt_13th
    for item, key in ((40, "representation"), (41, "transportation"), (42, "cola"),
                      (43, "housing_allowance"), (45, "commission"), (46, "profit_sharing"),
                      (47, "directors_fees"), (49, "hazard_pay")):
        values[item] = _amount(data, key)
    return values


def employee_name(data: dict) -> str:
    """LAST, FIRST MIDDLE"""
    name = (data.get("last_name") or "").upper()
    if data.get("first_name"):
        name += f", {data['first_name'].upper()}"
    if data.get("middle_name"):
        name += f" {data['middle_name'].upper()}"
    return name


class Bir2316TemplateService:
    def __init__(self, template_path: str):
        self.template_path = template_path

    def has_template(self) -> bool:
        return bool(self.template_path) and os.path.isfile(self.template_path)

    def require_template(self):
        if not self.has_template():
            raise TemplateNotFoundError(self.template_path)

    # ---------- cell map ----------

    def cell_values(self, data: dict, company) -> dict:
        """Template cell reference -> value for one certificate payload."""
        cells = {"C11": data.get("tax_year")}

        optional = {
            "C14": format_tin(digits_only(data.get("tin"))) if data.get("tin") else None,
            "C16": employee_name(data) or None,
            "Q16": data.get("rdo_code"),
            "C19": data.get("address"),
            "Q19": data.get("zip_code"),
            "C22": data.get("local_address"),
            "Q22": data.get("local_zip_code"),
            "C26": data.get("foreign_address"),
            "C29": format_date(data.get("date_of_birth")) or None,
            "L29": data.get("telephone") or data.get("phone"),
            "C32": data.get("min_wage_rate_day"),
            "C35": data.get("min_wage_rate_month"),
            "B38": "X" if data.get("is_minimum_wage_earner") else None,
            "C41": format_tin(digits_only(company.tin)) if company.tin else None,
            "C43": company.name.upper() if company.name else None,
            "C46": company.address,
            "Q46": company.zip_code,
        }
        cells.update({ref: value for ref, value in optional.items() if value})
        cells["H49"] = "X"

        for item, value in part_iv_a_values(data).items():
            cells[f"{PART_IV_A_COLUMN}{PART_IV_A_ROWS[item]}"] = value
        for item, value in part_iv_b_values(data).items():
            cells[f"{PART_IV_B_COLUMN}{PART_IV_B_ROWS[item]}"] = value
        return cells

    @staticmethod
    def _set(ws, ref, value):
        # values inside a merged block go to its top-left cell
        for rng in ws.merged_cells.ranges:
            if ref in rng:
                cell = ws.cell(row=rng.min_row, column=rng.min_col)
                break
        else:
            cell = ws[ref]
        cell.value = float(value) if isinstance(value, Decimal) else value
        cell.fill = WHITE_FILL

    def fill_sheet(self, ws, data: dict, company):
        for ref, value in self.cell_values(data, company).items():
            self._set(ws, ref, value)

    def _load(self):
        self.require_template()
        return load_workbook(self.template_path)

    @staticmethod
    def _save(wb) -> bytes:
        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()

    # ---------- outputs ----------

    def to_excel(self, data: dict, company) -> ReportFile:
        wb = self._load()
        self.fill_sheet(wb.active, data, company)
        filename = f"bir_2316_{data.get('employee_number')}_{data.get('tax_year')}.xlsx"
        return ReportFile(self._save(wb), filename, CONTENT_TYPES["xlsx"])

    def to_batch_excel(self, certificates: list, company, year: int) -> ReportFile:
        if not certificates:
            raise NoDataError("No payroll data found for the selected year.", payload={"year": year})
        wb = self._load()
        template = wb.active
        taken = set()
        for data in certificates:
            ws = wb.copy_worksheet(template)
            ws.title = sheet_title(data.get("last_name"), data.get("first_name"), taken | set(wb.sheetnames))
            taken.add(ws.title)
            self.fill_sheet(ws, data, company)
        wb.remove(template)
        wb.active = 0
        log.info("Filled BIR 2316 template for %d employees (%s)", len(certificates), year)
        return ReportFile(self._save(wb), f"bir_2316_batch_{year}.xlsx", CONTENT_TYPES["xlsx"])

    def pdf_sections(self, data: dict, company):
        cells = self.cell_values(data, company)
        part_a = [
            (f"{item}. {PART_IV_A_LABELS[item]}", cells.get(f"{PART_IV_A_COLUMN}{row}"))
            for item, row in PART_IV_A_ROWS.items()
        ]
        part_b = [
            (f"{item}. {PART_IV_B_LABELS[item]}", cells[f"{PART_IV_B_COLUMN}{row}"])
            for item, row in PART_IV_B_ROWS.items()
            if f"{PART_IV_B_COLUMN}{row}" in cells
        ]
        return [
            ("Part I - Employee Information", [
                ("Taxpayer Identification Number", cells.get("C14", "")),
                ("Employee's Name", cells.get("C16", "")),
                ("Registered Address", cells.get("C19", "")),
                ("ZIP Code", cells.get("Q19", "")),
                ("Date of Birth", cells.get("C29", "")),
                ("Contact Number", cells.get("L29", "")),
            ]),
            ("Part II - Employer Information (Present)", [
                ("Taxpayer Identification Number", cells.get("C41", "")),
                ("Employer's Name", cells.get("C43", "")),
                ("Registered Address", cells.get("C46", "")),
                ("ZIP Code", cells.get("Q46", "")),
                ("Type of Employer", "Main Employer"),
            ]),
            ("Part IV-A - Summary", part_a),
            ("Part IV-B - Details of Compensation Income", part_b),
        ]

    def to_pdf(self, certificates: list, company, year: int) -> ReportFile:
        """One page per certificate; a single certificate is named after the employee."""
        self.require_template()
        if not certificates:
            raise NoDataError("No payroll data found for the selected year.", payload={"year": year})
        pages = [self.pdf_sections(data, company) for data in certificates]
        content = pdf.render_certificates(
            company.name,
            "BIR Form 2316 - Certificate of Compensation Payment/Tax Withheld",
            f"For the Year {year}",
            pages,
        )
        if len(certificates) == 1:
            filename = f"bir_2316_{certificates[0].get('employee_number')}_{year}.pdf"
        else:
            filename = f"bir_2316_{year}.pdf"
        return ReportFile(content, filename, CONTENT_TYPES["pdf"])
