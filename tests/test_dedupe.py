from dossier.domain.models import NOT_RECORDED, PersonEntity, SourcedValue
from dossier.features.extraction.dedupe import deduplicate_people, identity_key, normalize_name, normalize_rut


def make_person(role: str, name: str, rut: str = NOT_RECORDED) -> PersonEntity:
    blank = SourcedValue(NOT_RECORDED)
    return PersonEntity(
        role=SourcedValue(role),
        name=SourcedValue(name),
        rut=SourcedValue(rut),
        dob=blank,
        phones=blank,
        address=blank,
        link=blank,
        participation=blank,
        observations=blank,
        nationality=blank,
    )


def test_normalize_rut_keeps_digits_and_check_letter() -> None:
    assert normalize_rut("12.345.678-k") == "12345678K"
    assert normalize_rut(NOT_RECORDED) == ""


def test_normalize_name_strips_accents_and_case() -> None:
    assert normalize_name("  María José Núñez ") == "maria jose nunez"
    assert normalize_name(NOT_RECORDED) == ""


def test_identity_key_prefers_rut_then_name() -> None:
    assert identity_key(make_person("Madre", "Ana Soto", "12.345.678-9"), 0) == "ID:123456789"
    assert identity_key(make_person("Madre", "Ana Soto", "123"), 0) == "NAME:ana soto"
    assert identity_key(make_person("Madre", "Ana", "123"), 4) == "RAW:4:Ana"


def test_same_rut_collapses_to_one_and_prefers_minor_role() -> None:
    people = [
        make_person("Hijo", "Pedro Soto", "21.000.111-2"),
        make_person("Madre", "Ana Soto", "12.345.678-9"),
        make_person("NNA", "Pedro Soto Rojas", "21000111-2"),
    ]

    result = deduplicate_people(people)

    assert [p.name.value for p in result] == ["Pedro Soto Rojas", "Ana Soto"]
    assert result[0].role.value == "NNA"


def test_first_mention_wins_when_roles_do_not_decide() -> None:
    people = [
        make_person("NNA", "Pedro Soto", "21.000.111-2"),
        make_person("NNA (hermano)", "Pedro S.", "21.000.111-2"),
        make_person("Padre", "Luis Soto"),
        make_person("Padre biológico", "luis sóto"),
    ]

    result = deduplicate_people(people)

    assert [p.name.value for p in result] == ["Pedro Soto", "Luis Soto"]


def test_unidentifiable_people_are_never_merged() -> None:
    people = [make_person("Tío", "Leo"), make_person("Tío", "Leo"), make_person("Otro", NOT_RECORDED)]

    assert len(deduplicate_people(people)) == 3


def test_deduplication_is_idempotent() -> None:
    people = [
        make_person("Hijo", "Pedro Soto", "21.000.111-2"),
        make_person("NNA", "Pedro Soto", "21000111-2"),
        make_person("Tío", "Leo"),
        make_person("Tío", "Leo"),
        make_person("Madre", "Ana Soto"),
        make_person("madre", "ANA SOTO"),
    ]

    once = deduplicate_people(people)

    assert deduplicate_people(once) == once


def test_unrecorded_rut_is_not_an_identity() -> None:
    people = [make_person("Madre", "Ana Soto"), make_person("Padre", "Luis Rojas")]

    assert len(deduplicate_people(people)) == 2


def test_unrecorded_names_do_not_merge() -> None:
    people = [make_person("Testigo", NOT_RECORDED), make_person("Vecina", NOT_RECORDED)]

    assert normalize_name(NOT_RECORDED) == ""
    assert [p.role.value for p in deduplicate_people(people)] == ["Testigo", "Vecina"]
