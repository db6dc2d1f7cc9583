from __future__ import annotations

import pytest

from nodebook.cnl.lexer import (
    LineKind,
    classify_line,
    clean_name,
    extract_adverb,
    extract_modality,
    extract_unit,
    fence_language,
    fnv1a6,
    node_id_for,
    normalize_quantifier,
    parse_attribute_line,
    parse_function_line,
    parse_heading,
    parse_relation_line,
    parse_relation_target,
    slug,
    split_weight,
)


@pytest.mark.parametrize(
    ("line", "kind"),
    [
        ("", LineKind.BLANK),
        ("   ", LineKind.BLANK),
        ("```description", LineKind.FENCE),
        ("```", LineKind.FENCE),
        ("# Water [Molecule]", LineKind.NODE_HEADING),
        ("## Ice", LineKind.MORPH_HEADING),
        ("### Notes", LineKind.TEXT),
        ("<has prior_state> 2 X;", LineKind.RELATION),
        ('has function "atomicMass";', LineKind.FUNCTION),
        ('state: "liquid";', LineKind.ATTRIBUTE),
        ("has mass: 5 *kg*;", LineKind.ATTRIBUTE),
        ("just some prose", LineKind.TEXT),
        ("#hashtag", LineKind.TEXT),
    ],
)
def test_classify_line(line: str, kind: LineKind) -> None:
    assert classify_line(line) is kind


def test_fence_language() -> None:
    assert fence_language("```description") == "description"
    assert fence_language("```graph-description") == "graph-description"
    assert fence_language("```") == ""
    assert fence_language("not a fence") == ""


def test_clean_name_and_slug() -> None:
    assert clean_name("Water") == "water"
    assert clean_name("  Carbon   Dioxide ") == "carbon_dioxide"
    assert clean_name("H2O (liquid)!") == "h2o_liquid"
    assert clean_name("self-driving Car") == "self-driving_car"
    assert slug("has prior_state") == "has_prior_state"
    assert slug("Mass (kg)") == "mass_(kg)"


def test_node_id_for_adjective_prefix() -> None:
    assert node_id_for("Water") == "water"
    assert node_id_for("Water", "hot") == "hot_water"
    assert node_id_for("Water", "Very Hot") == "very_hot_water"


def test_fnv1a6_is_stable_hex_prefix() -> None:
    # FNV-1a offset basis for the empty string
    assert fnv1a6("") == "811c9d"
    first = fnv1a6('"liquid"')
    assert first == fnv1a6('"liquid"')
    assert first != fnv1a6('"solid"')
    assert len(first) == 6
    int(first, 16)


def test_normalize_quantifier() -> None:
    assert normalize_quantifier("all") == "universal"
    assert normalize_quantifier("Every") == "universal"
    assert normalize_quantifier("some") == "existential"
    assert normalize_quantifier("exists") == "existential"
    assert normalize_quantifier("most") == "most"
    assert normalize_quantifier(None) is None
    assert normalize_quantifier("  ") is None


def test_extraction_stages_return_remainder() -> None:
    assert extract_unit("5 *kg*") == ("kg", "5")
    assert extract_unit("5") == (None, "5")
    assert extract_adverb("fast ++very++") == ("very", "fast")
    assert extract_modality("true [possibly]") == ("possibly", "true")


def test_split_weight() -> None:
    assert split_weight("6 CO2") == (6, "CO2")
    assert split_weight("2.5 Water") == (2.5, "Water")
    assert split_weight("CO2") == (1, "CO2")
    weight, _ = split_weight("2.0 X")
    assert weight == 2 and isinstance(weight, int)


def test_parse_heading_variants() -> None:
    plain = parse_heading("# Water [Molecule]")
    assert plain.node_id == "water"
    assert plain.base_name == "Water"
    assert plain.role == "Molecule"
    assert plain.adjective is None

    untyped = parse_heading("# Water")
    assert untyped.role == "individual"

    adj = parse_heading("# **hot** Water [Substance]")
    assert adj.node_id == "hot_water"
    assert adj.display_name == "**hot** Water"
    assert adj.adjective == "hot"
    assert adj.role == "Substance"

    quant = parse_heading("# *all* Humans [class]")
    assert quant.quantifier == "universal"
    assert quant.node_id == "humans"
    assert quant.role == "class"


def test_parse_attribute_line_stages() -> None:
    plain = parse_attribute_line('state: "liquid";')
    assert plain is not None
    assert plain.name == "state"
    assert plain.value == '"liquid"'
    assert plain.unit is None

    full = parse_attribute_line("has mass: 5 *kg* ++roughly++ [probably];")
    assert full is not None
    assert full.name == "mass"
    assert full.value == "5"
    assert full.unit == "kg"
    assert full.adverb == "roughly"
    assert full.modality == "probably"

    assert parse_attribute_line("no colon here") is None


def test_parse_function_line() -> None:
    assert parse_function_line('has function "atomicMass";') == "atomicMass"
    assert parse_function_line("has function atomicMass;") is None


def test_parse_relation_line_splits_targets() -> None:
    assert parse_relation_line("<has prior_state> 2 X; Y;") == ("has prior_state", ("2 X", "Y"))
    assert parse_relation_line("<is_a> Mammal") == ("is_a", ("Mammal",))
    assert parse_relation_line("no relation") is None


def test_parse_relation_target() -> None:
    target = parse_relation_target("6 CO2")
    assert target.node_id == "co2"
    assert target.weight == 6

    adj = parse_relation_target("**hot** Water")
    assert adj.node_id == "hot_water"
    assert adj.adjective == "hot"
    assert adj.base_name == "Water"
    assert adj.weight == 1
