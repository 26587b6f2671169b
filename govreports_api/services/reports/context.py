import logging
from dataclasses import dataclass, field
from typing import NamedTuple

from govreports_api.extensions import db
from govreports_api.models.master import EMPLOYER_INFO_KEYS, Company

log = logging.getLogger(__name__)

DEFAULT_COMPANY_NAME = "Company"


@dataclass(frozen=True)
class CompanyProfile:
    """Employer details printed on every report; passed explicitly to generators."""
    name: str = DEFAULT_COMPANY_NAME
    tin: str = ""
    address: str = ""
    zip_code: str = ""
    telephone: str = ""
    rdo_code: str = ""
    sss_number: str = ""
    philhealth_number: str = ""
    pagibig_number: str = ""
    company_id: int | None = field(default=None, compare=False)

    @classmethod
    def from_company(cls, company: Company | None) -> "CompanyProfile":
        if company is None:
            return cls()
        return cls(
            name=company.name or DEFAULT_COMPANY_NAME,
            company_id=company.id,
            **{key: company.info(key) for key in EMPLOYER_INFO_KEYS},
        )

    @classmethod
    def load(cls, company_id: int | None = None) -> "CompanyProfile":
        """Company by id, else the first active company, else a placeholder profile."""
        company = None
        if company_id is not None:
            company = db.session.get(Company, company_id)
            if company is None:
                log.warning("Company %s not found; using placeholder profile", company_id)
        else:
            company = Company.query.filter_by(is_active=True).order_by(Company.id).first()
        return cls.from_company(company)


class ReportData(NamedTuple):
    rows: list
    totals: dict


class ReportFile(NamedTuple):
    content: bytes
    filename: str
    content_type: str


CONTENT_TYPES = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
    "csv": "text/csv",
    "dat": "text/plain",
    "txt": "text/plain",
}
