from enum import Enum


class PeriodType(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


class ReportTypeEnum(str, Enum):
    """Base for agency report types; each member carries its display metadata."""

    def __new__(cls, value, label, short_label, description, period_type):
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.label = label
        obj.short_label = short_label
        obj.description = description
        obj.period_type = period_type
        return obj

    @property
    def is_monthly_report(self) -> bool:
        return self.period_type is PeriodType.MONTHLY

    @property
    def is_quarterly_report(self) -> bool:
        return self.period_type is PeriodType.QUARTERLY

    @property
    def is_annual_report(self) -> bool:
        return self.period_type is PeriodType.ANNUAL

    def to_option(self) -> dict:
        return {
            "value": self.value,
            "label": self.label,
            "shortLabel": self.short_label,
            "description": self.description,
            "periodType": self.period_type.value,
        }

    @classmethod
    def options(cls) -> list[dict]:
        return [member.to_option() for member in cls]

    @classmethod
    def parse(cls, value):
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


class BirReportType(ReportTypeEnum):
    FORM_1601C = (
        "1601c",
        "BIR Form 1601-C - Monthly Remittance Return",
        "1601-C",
        "Monthly remittance of income taxes withheld on compensation (withholding tax).",
        PeriodType.MONTHLY,
    )
    FORM_1604CF = (
        "1604cf",
        "BIR Form 1604-CF - Annual Information Return",
        "1604-CF",
        "Annual information return of income taxes withheld on compensation and final withholding taxes.",
        PeriodType.ANNUAL,
    )
    FORM_2316 = (
        "2316",
        "BIR Form 2316 - Certificate of Compensation Payment",
        "2316",
        "Per-employee certificate of compensation payment and tax withheld.",
        PeriodType.ANNUAL,
    )
    ALPHALIST = (
        "alphalist",
        "Alphalist of Employees",
        "Alphalist",
        "Annual alphabetical list of employees (schedules 7.1, 7.2 and 7.3).",
        PeriodType.ANNUAL,
    )

    @property
    def is_employee_certificate(self) -> bool:
        return self is BirReportType.FORM_2316

    @property
    def supports_dat_export(self) -> bool:
        return self is not BirReportType.FORM_1601C


class SssReportType(ReportTypeEnum):
    R3 = (
        "r3",
        "SSS R3 - Monthly Contribution Collection List",
        "R3",
        "Monthly employee and employer SS contributions.",
        PeriodType.MONTHLY,
    )
    R5 = (
        "r5",
        "SSS R5 - Quarterly Loan Amortization",
        "R5",
        "SSS loan amortizations deducted during the quarter.",
        PeriodType.QUARTERLY,
    )
    SBR = (
        "sbr",
        "SSS SBR - Summary of Contributions by Payroll",
        "SBR",
        "Contribution totals per payroll period for the month.",
        PeriodType.MONTHLY,
    )
    ECL = (
        "ecl",
        "SSS ECL - Electronic Collection List",
        "ECL",
        "Fixed-width electronic collection list for SSS online submission.",
        PeriodType.MONTHLY,
    )


class PhilhealthReportType(ReportTypeEnum):
    RF1 = (
        "rf1",
        "PhilHealth RF1 - Electronic Remittance Form",
        "RF1",
        "Monthly employee and employer PhilHealth premium contributions.",
        PeriodType.MONTHLY,
    )
    ER2 = (
        "er2",
        "PhilHealth ER2 - Employer Remittance Report",
        "ER2",
        "Roster of active employees registered with PhilHealth.",
        PeriodType.MONTHLY,
    )
    MDR = (
        "mdr",
        "PhilHealth MDR - Member Data Record",
        "MDR",
        "Newly hired employees for member registration.",
        PeriodType.MONTHLY,
    )

    @property
    def supports_date_range(self) -> bool:
        return self is PhilhealthReportType.MDR


class PagibigReportType(ReportTypeEnum):
    MCRF = (
        "mcrf",
        "Pag-IBIG MCRF - Monthly Collection Remittance Form",
        "MCRF",
        "Monthly employee and employer Pag-IBIG savings contributions.",
        PeriodType.MONTHLY,
    )
    STL = (
        "stl",
        "Pag-IBIG STL - Short-Term Loan Remittance",
        "STL",
        "Multi-purpose and calamity loan amortizations for the month.",
        PeriodType.MONTHLY,
    )
    HDL = (
        "hdl",
        "Pag-IBIG HDL - Housing Loan Remittance",
        "HDL",
        "Housing loan amortizations for the month.",
        PeriodType.MONTHLY,
    )


class LoanType(str, Enum):
    SSS_SALARY = "sss_salary"
    SSS_CALAMITY = "sss_calamity"
    SSS_EDUCATIONAL = "sss_educational"
    SSS_EMERGENCY = "sss_emergency"
    SSS_STOCK_INVESTMENT = "sss_stock_investment"
    PAGIBIG_MPL = "pagibig_mpl"
    PAGIBIG_CALAMITY = "pagibig_calamity"
    PAGIBIG_HOUSING = "pagibig_housing"
    COMPANY_CASH_ADVANCE = "company_cash_advance"

    @property
    def label(self) -> str:
        return _LOAN_LABELS[self]

    @property
    def is_sss_loan(self) -> bool:
        return self.value.startswith("sss_")

    @property
    def is_pagibig_loan(self) -> bool:
        return self.value.startswith("pagibig_")

    @classmethod
    def sss_loan_types(cls):
        return [t for t in cls if t.is_sss_loan]

    @classmethod
    def sss_loan_type_values(cls):
        return [t.value for t in cls.sss_loan_types()]

    @classmethod
    def label_for(cls, value) -> str:
        try:
            return cls(value).label
        except ValueError:
            return str(value)


_LOAN_LABELS = {
    LoanType.SSS_SALARY: "SSS Salary Loan",
    LoanType.SSS_CALAMITY: "SSS Calamity Loan",
    LoanType.SSS_EDUCATIONAL: "SSS Educational Loan",
    LoanType.SSS_EMERGENCY: "SSS Emergency Loan",
    LoanType.SSS_STOCK_INVESTMENT: "SSS Stock Investment Loan",
    LoanType.PAGIBIG_MPL: "Pag-IBIG Multi-Purpose Loan",
    LoanType.PAGIBIG_CALAMITY: "Pag-IBIG Calamity Loan",
    LoanType.PAGIBIG_HOUSING: "Pag-IBIG Housing Loan",
    LoanType.COMPANY_CASH_ADVANCE: "Company Cash Advance",
}

EXPORT_FORMATS = ("xlsx", "pdf", "csv", "dat")
BIR_TEMPLATE_FORMATS = ("xlsx-template", "pdf-template")
