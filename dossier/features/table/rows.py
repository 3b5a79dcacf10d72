from collections.abc import Iterable

from dossier.domain.models import CaseRecord, ConsolidatedRow, PersonEntity
from dossier.features.extraction.dedupe import deduplicate_people
from dossier.features.table.formatting import (
    format_address,
    format_date,
    format_phone,
    format_relationship,
    parse_name,
    to_title_case,
)

MINOR_ROLE_MARKERS = ("nna", "niño", "niña", "adolescente", "hijo", "hija")
CAREGIVER_ROLE_MARKERS = ("madre", "padre", "abuel", "tía", "tío", "cuidada")

UNIDENTIFIED = "No Identificado"
EMPTY_CELL = "-"

COLUMNS = (
    "minor_names",
    "minor_last1",
    "minor_last2",
    "minor_rut",
    "delivery_date",
    "rit",
    "hearing",
    "adult_name",
    "adult_relationship",
    "adult_rut",
    "adult_phone",
    "adult_address",
)
HEADERS = (
    "NOMBRES NNA",
    "PRIMER APELLIDO",
    "SEGUNDO APELLIDO",
    "RUT NNA",
    "FECHA ENTREGA",
    "RIT",
    "AUDIENCIA",
    "ADULTO RESPONSABLE",
    "RELACIÓN",
    "RUT ADULTO",
    "TELÉFONO",
    "DIRECCIÓN",
)


def is_minor(person: PersonEntity) -> bool:
    role = person.role.value.lower()
    return any(m in role for m in MINOR_ROLE_MARKERS)


def is_responsible_adult(person: PersonEntity) -> bool:
    role = person.role.value.lower()
    return any(m in role for m in CAREGIVER_ROLE_MARKERS) and "nna" not in role


def consolidate_rows(record: CaseRecord) -> list[ConsolidatedRow]:
    """Project one case into matrix rows, one per minor (or one placeholder)."""
    data = record.analysis
    minors = deduplicate_people(p for p in data.people if is_minor(p))
    adult = next((p for p in data.people if is_responsible_adult(p)), None)

    shared = {
        "case_id": record.id,
        "delivery_date": "",
        "rit": data.rit.value,
        "hearing": format_date(data.hearings[0].date.value) if data.hearings else "",
        "adult_name": to_title_case(adult.name.value) if adult else UNIDENTIFIED,
        "adult_relationship": format_relationship(adult.role.value) if adult else EMPTY_CELL,
        "adult_rut": adult.rut.value if adult else EMPTY_CELL,
        "adult_phone": format_phone(adult.phones.value) if adult else EMPTY_CELL,
        "adult_address": format_address(adult.address.value) if adult else EMPTY_CELL,
    }

    if not minors:
        return [
            ConsolidatedRow(
                row_key=f"{record.id}-0",
                minor_names=UNIDENTIFIED,
                minor_last1="",
                minor_last2="",
                minor_rut=EMPTY_CELL,
                **shared,
            )
        ]

    rows: list[ConsolidatedRow] = []
    for index, minor in enumerate(minors):
        name = parse_name(minor.name.value)
        rows.append(
            ConsolidatedRow(
                row_key=f"{record.id}-{index}",
                minor_names=name["names"],
                minor_last1=name["last1"],
                minor_last2=name["last2"],
                minor_rut=minor.rut.value,
                **shared,
            )
        )
    return rows


def consolidate_cases(records: Iterable[CaseRecord]) -> list[ConsolidatedRow]:
    return [row for record in records for row in consolidate_rows(record)]


def row_to_tsv(row: ConsolidatedRow) -> str:
    cells = [getattr(row, c) for c in COLUMNS]
    cells[-1] = f'"{row.adult_address}"'
    return "\t".join(cells)


def rows_to_tsv(rows: Iterable[ConsolidatedRow]) -> str:
    return "\n".join(row_to_tsv(r) for r in rows)
