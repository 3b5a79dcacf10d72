"""Text formatting for the consolidated case matrix.

These follow the conventions of the spreadsheet the matrix is pasted into:
Spanish names (given names + two surnames), DD-MM-YYYY dates, Chilean
mobile numbers and upper-cased commune names.
"""

import re

_TITLE_START_RE = re.compile(r"(?:^|\s|['\"(-])\S")
_QUOTES_RE = re.compile(r"['\"]")
_NOT_APPLICABLE_RE = re.compile(r"\bno\b", re.IGNORECASE)
_TEXT_DATE_RE = re.compile(r"(\d{1,2})\s+de\s+([a-z]+)\s+(?:de|del)\s+(\d{4})")
_NUMERIC_DATE_RE = re.compile(r"(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})")
_NON_DIGIT_RE = re.compile(r"\D")

MONTHS = {
    "enero": "01",
    "febrero": "02",
    "marzo": "03",
    "abril": "04",
    "mayo": "05",
    "junio": "06",
    "julio": "07",
    "agosto": "08",
    "septiembre": "09",
    "octubre": "10",
    "noviembre": "11",
    "diciembre": "12",
}

COUNTRY_CODE = "56"
MOBILE_PREFIX = "9"

COMMUNES = (
    "San Bernardo",
    "Calera De Tango",
    "Buin",
    "Paine",
    "El Bosque",
    "La Pintana",
    "San Ramon",
    "Santiago",
    "Puente Alto",
    "La Cisterna",
    "Lo Espejo",
    "San Miguel",
    "Talagante",
    "Isla De Maipo",
)
_COMMUNE_RES = tuple((re.compile(re.escape(c), re.IGNORECASE), c.upper()) for c in COMMUNES)


def to_title_case(text: str) -> str:
    if not text:
        return ""
    return _TITLE_START_RE.sub(lambda m: m.group(0).upper(), text.lower())


def parse_name(full_name: str) -> dict[str, str]:
    """Split a full name into given names and two surnames.

    1 token: given name only. 2 tokens: given name + first surname.
    3+ tokens: the last two are the surnames, the rest are given names.
    """
    parts = to_title_case(_QUOTES_RE.sub("", full_name or "").strip()).split()

    if not parts:
        return {"names": "", "last1": "", "last2": ""}
    if len(parts) == 1:
        return {"names": parts[0], "last1": "", "last2": ""}
    if len(parts) == 2:
        return {"names": parts[0], "last1": parts[1], "last2": ""}
    return {"names": " ".join(parts[:-2]), "last1": parts[-2], "last2": parts[-1]}


def format_date(date_str: str) -> str:
    if not date_str or len(date_str) < 3 or _NOT_APPLICABLE_RE.search(date_str):
        return ""

    m = _TEXT_DATE_RE.search(date_str.lower())
    if m and m.group(2) in MONTHS:
        return f"{m.group(1).zfill(2)}-{MONTHS[m.group(2)]}-{m.group(3)}"

    m = _NUMERIC_DATE_RE.search(date_str)
    if m:
        return f"{m.group(1).zfill(2)}-{m.group(2).zfill(2)}-{m.group(3)}"

    return date_str


def format_phone(phone: str) -> str:
    digits = _NON_DIGIT_RE.sub("", phone or "")
    core = digits
    if digits.startswith(COUNTRY_CODE + MOBILE_PREFIX):
        core = digits[len(COUNTRY_CODE):]

    if len(core) == 9 and core.startswith(MOBILE_PREFIX):
        return f"{core[0]} {core[1:5]} {core[5:]}"
    return phone


def format_relationship(role: str) -> str:
    lower = (role or "").lower()
    if "madre" in lower:
        return "Madre"
    if "padre" in lower:
        return "Padre"
    return to_title_case(role)


def format_address(address: str) -> str:
    formatted = to_title_case(address)
    for pattern, upper in _COMMUNE_RES:
        formatted = pattern.sub(upper, formatted)
    return formatted
