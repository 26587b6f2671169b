"""Cell/column helpers shared by every report serializer."""
import re
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from openpyxl.utils import get_column_letter

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

_NAME_JUNK = re.compile(r"[^A-Za-z\s]")
_WS = re.compile(r"\s+")
_DAT_UNSAFE = re.compile(r"[|\r\n]+")


def column_letter(index: int) -> str:
    """0-based column index → spreadsheet letter (0 → A, 25 → Z, 26 → AA)."""
    if index < 0:
        raise ValueError(f"column index must be >= 0, got {index}")
    return get_column_letter(index + 1)


def to_decimal(value) -> Decimal:
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO


def money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_str(value) -> str:
    """Two decimals, '.' separator, no grouping (DAT files)."""
    return f"{money(value):.2f}"


def cents(value) -> int:
    """Amount in centavos, half-up (fixed-width files)."""
    return int((to_decimal(value) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def digits_only(value) -> str:
    return re.sub(r"\D", "", str(value or ""))


def format_tin(value) -> str:
    """XXX-XXX-XXX or XXX-XXX-XXX-XXX; anything else is returned as-is."""
    digits = digits_only(value)
    if len(digits) >= 12:
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:9]}-{digits[9:12]}"
    if len(digits) >= 9:
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:9]}"
    return str(value or "")


def clean_name(value) -> str:
    """Letters and spaces only, upper-cased, single spaced."""
    text = _NAME_JUNK.sub("", str(value or ""))
    return _WS.sub(" ", text.upper()).strip()


def dat_text(value) -> str:
    """Upper-cased free text with the record separator and line breaks removed."""
    return _DAT_UNSAFE.sub(" ", str(value or "")).upper().strip()


def format_date(value, fmt="%m/%d/%Y") -> str:
    if not value:
        return ""
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value[:10])
        except ValueError:
            return value
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime(fmt)


def format_address(address) -> str:
    """Join the non-empty parts of an address dict with ', '."""
    if not address:
        return ""
    if isinstance(address, str):
        return address
    keys = ("street", "barangay", "city", "province")
    parts = [address.get(k) for k in keys]
    parts.append(address.get("postal_code") or address.get("zip_code"))
    return ", ".join(str(p) for p in parts if p)


def format_gender(value) -> str:
    v = str(value or "").strip().lower()
    if v in ("male", "m"):
        return "M"
    if v in ("female", "f"):
        return "F"
    return ""


def as_float(value) -> float:
    return float(money(value))
