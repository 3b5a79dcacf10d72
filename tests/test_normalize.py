import math

from dossier.domain.models import DOSSIER_DIMENSIONS, NOT_RECORDED, SourcedValue
from dossier.features.extraction.normalize import dossier_item, normalize_case, sourced_value
from dossier.features.extraction.schemas import (
    ANALYSIS_UNAVAILABLE,
    DOSSIER_UNAVAILABLE,
    CaseExtractionSchema,
    request_json_schema,
    traced_fields,
)

from conftest import sample_payload


def test_sourced_value_defaults_missing_fields() -> None:
    v = sourced_value({})

    assert v.value == NOT_RECORDED
    assert v.page == 0
    assert v.quote == ""


def test_sourced_value_page_is_always_a_non_negative_int() -> None:
    for raw_page in (None, "", "abc", float("nan"), math.inf, -3, True, [], {}):
        assert sourced_value({"value": "x", "page": raw_page}).page == 0

    assert sourced_value({"value": "x", "page": 4}).page == 4
    assert sourced_value({"value": "x", "page": "7"}).page == 7
    assert sourced_value({"value": "x", "page": 2.0}).page == 2


def test_sourced_value_accepts_garbage_input() -> None:
    for raw in (None, "texto suelto", 12, ["a"]):
        v = sourced_value(raw)
        assert v.value == NOT_RECORDED
        assert v.page == 0


def test_dossier_item_only_keeps_sequences() -> None:
    item = dossier_item({"content": "", "strategy": "no es lista", "tools": ["PSI", "E2P"]})

    assert item.content == DOSSIER_UNAVAILABLE
    assert item.strategy == ()
    assert item.tools == ("PSI", "E2P")


def test_normalize_case_fills_every_dossier_dimension() -> None:
    data = normalize_case({})

    for key in DOSSIER_DIMENSIONS:
        assert getattr(data.dossier, key).content == DOSSIER_UNAVAILABLE
    assert data.rit.value == NOT_RECORDED
    assert data.people == ()
    assert data.technical_analysis == ANALYSIS_UNAVAILABLE
    assert data.missing_info == ()


def test_normalize_case_deduplicates_people() -> None:
    data = normalize_case(sample_payload())

    # "juan pérez gómez" and "Juan Perez Gomez" share a RUT once punctuation is removed.
    names = [p.name.value for p in data.people]
    assert names == ["juan pérez gómez", "maría gómez soto"]
    assert data.dossier.identification.tools == ("E2P",)
    assert data.hearings[0].date.value == "16 de febrero de 2026"
    assert data.missing_info == ("Informe escolar",)


def test_normalize_case_tolerates_malformed_lists() -> None:
    data = normalize_case({"people": "nadie", "hearings": [None, 3], "citations": {"a": 1}})

    assert data.people == ()
    assert len(data.hearings) == 2
    assert data.hearings[0].date.value == NOT_RECORDED
    assert data.citations == ()


def test_dossier_sections_follow_presentation_order() -> None:
    sections = normalize_case(sample_payload()).dossier.sections()

    assert [label for label, _ in sections] == list(DOSSIER_DIMENSIONS.values())
    assert sections[0][1].content == "NNA de 8 años"


def test_traced_schema_fields_match_the_domain_types() -> None:
    from dataclasses import fields

    from dossier.domain.models import CaseData, PersonEntity
    from dossier.features.extraction.schemas import PersonSchema

    case_traced = {f.name for f in fields(CaseData) if f.type in (SourcedValue, "SourcedValue")}
    assert set(traced_fields(CaseExtractionSchema)) == case_traced
    assert set(traced_fields(PersonSchema)) == {f.name for f in fields(PersonEntity)}
    assert list(CaseExtractionSchema.model_fields["dossier"].annotation.model_fields) == list(DOSSIER_DIMENSIONS)


def test_request_schema_requires_every_field_and_carries_no_defaults() -> None:
    schema = request_json_schema()

    assert set(schema["required"]) == set(CaseExtractionSchema.model_fields)
    person = schema["$defs"]["PersonSchema"]
    assert set(person["required"]) == set(person["properties"])

    def keys(node):
        if isinstance(node, dict):
            for k, v in node.items():
                yield k
                yield from keys(v)
        elif isinstance(node, list):
            for v in node:
                yield from keys(v)

    assert "default" not in set(keys(schema))


def test_list_entries_are_coerced_to_strings() -> None:
    data = normalize_case(
        {
            "dossier": {"gravity": {"content": 0, "strategy": [1, "Visita"], "tools": None}},
            "missing_info": ["", None, "Informe escolar", 7],
            "technical_analysis": None,
        }
    )

    assert data.dossier.gravity.content == DOSSIER_UNAVAILABLE
    assert data.dossier.gravity.strategy == ("1", "Visita")
    assert data.dossier.gravity.tools == ()
    assert data.missing_info == ("Informe escolar", "7")
    assert data.technical_analysis == ANALYSIS_UNAVAILABLE


def test_traced_values_in_people_are_coerced() -> None:
    data = normalize_case({"people": [{"role": "NNA", "name": {"value": 42, "page": "3", "quote": None}}]})

    (p,) = data.people
    assert p.role.value == NOT_RECORDED
    assert (p.name.value, p.name.page, p.name.quote) == ("42", 3, "")
