import re
import unicodedata
from collections.abc import Iterable

from dossier.domain.models import NOT_RECORDED, PersonEntity

# Role text that marks a person as the child/adolescent the case is about.
MINOR_ROLE_MARKER = "NNA"

_MIN_RUT_LENGTH = 5
_MIN_NAME_LENGTH = 3
# A RUT is digits plus an optional K check character; everything else is punctuation.
_RUT_NOISE_RE = re.compile(r"[^0-9kK]")


def normalize_rut(raw: str) -> str:
    return _RUT_NOISE_RE.sub("", raw or "").upper()


def normalize_name(raw: str) -> str:
    # The sentinel is not a name; keying on it would merge everyone whose name was not recorded.
    if not raw or raw == NOT_RECORDED:
        return ""
    decomposed = unicodedata.normalize("NFD", raw.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).strip()


def is_minor_role(role: str) -> bool:
    return MINOR_ROLE_MARKER in (role or "").upper()


def identity_key(person: PersonEntity, position: int) -> str:
    """Key under which two mentions count as the same individual.

    RUT wins when it is long enough to be real, then the accent-stripped name.
    Anything else gets a key unique to its position so it is never merged.
    """
    rut = normalize_rut(person.rut.value)
    if len(rut) > _MIN_RUT_LENGTH:
        return f"ID:{rut}"

    name = normalize_name(person.name.value)
    if len(name) > _MIN_NAME_LENGTH:
        return f"NAME:{name}"

    return f"RAW:{position}:{person.name.value}"


def deduplicate_people(people: Iterable[PersonEntity]) -> list[PersonEntity]:
    kept: dict[str, PersonEntity] = {}

    for position, person in enumerate(people):
        key = identity_key(person, position)
        existing = kept.get(key)
        if existing is None:
            kept[key] = person
        elif is_minor_role(person.role.value) and not is_minor_role(existing.role.value):
            # Keeps the slot of the first mention, takes the record that confirms a minor.
            kept[key] = person

    return list(kept.values())
