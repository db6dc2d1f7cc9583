# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Place/Transition Net Structure Tests
# ──────────────────────────────────────────────────────────────────────
from __future__ import annotations

import math

import numpy as np
import pytest

from nodebook.cnl.assembler import operations_to_graph
from nodebook.cnl.parser import get_operations
from nodebook.petri.structure import PlaceTransitionNet


def _net(text: str, **kwargs) -> PlaceTransitionNet:
    return PlaceTransitionNet.from_graph(operations_to_graph(get_operations(text)), **kwargs)


def test_manual_build_and_matrices() -> None:
    net = PlaceTransitionNet()
    net.add_place("glucose", initial_tokens=2)
    net.add_place("co2")
    net.add_transition("respiration")
    net.add_arc("glucose", "respiration", weight=1)
    net.add_arc("respiration", "co2", weight=6)
    net.compile()

    assert net.is_compiled
    assert net.W_in.shape == (1, 2)
    assert net.W_out.shape == (2, 1)
    np.testing.assert_allclose(net.W_in.toarray(), [[1.0, 0.0]])
    np.testing.assert_allclose(net.W_out.toarray(), [[0.0], [6.0]])
    np.testing.assert_allclose(net.get_initial_marking(), [2.0, 0.0])
    assert net.input_weights("respiration") == {"glucose": 1.0}
    assert net.output_weights("respiration") == {"co2": 6.0}


def test_builder_rejects_invalid_input() -> None:
    net = PlaceTransitionNet()
    net.add_place("p")
    net.add_place("q")
    net.add_transition("t")
    with pytest.raises(ValueError, match="already exists"):
        net.add_place("p")
    with pytest.raises(ValueError, match="already exists"):
        net.add_transition("p")
    with pytest.raises(ValueError, match="Place<->Transition"):
        net.add_arc("p", "q")
    with pytest.raises(ValueError, match="Unknown node"):
        net.add_arc("p", "missing")
    with pytest.raises(ValueError, match="weight must be > 0"):
        net.add_arc("p", "t", weight=0)
    with pytest.raises(ValueError, match="finite"):
        net.add_place("r", initial_tokens=math.inf)


def test_empty_net_compiles() -> None:
    net = PlaceTransitionNet()
    net.compile()
    assert net.W_in.shape == (0, 0)
    assert net.get_initial_marking().shape == (0,)


def test_from_graph_classifies_places_and_seeds_inputs() -> None:
    net = _net("# A [Transition]\n<has prior_state> 2 X;\n<has post_state> Y;", initial_tokens=2)
    assert net.transition_names == ["a"]
    assert net.place_names == ["x", "y"]
    np.testing.assert_allclose(net.get_initial_marking(), [2.0, 0.0])
    assert net.input_weights("a") == {"x": 2.0}
    assert net.output_weights("a") == {"y": 1.0}
    assert net.role("a") == "Transition"


def test_parallel_arcs_are_summed() -> None:
    net = _net("# T [Transition]\n<has prior_state> X;\n<has prior_state> X;")
    assert net.input_weights("t") == {"x": 2.0}


def test_arcs_between_transitions_are_skipped() -> None:
    net = _net("# A [Transition]\n<has post_state> B;\n# B [Transition]")
    assert net.n_places == 0
    assert net.transition_names == ["a", "b"]
    assert net.output_weights("a") == {}


def test_non_petri_edges_are_ignored() -> None:
    net = _net("# A [Transition]\n<is_a> Process;\n<has post_state> Y;")
    assert net.place_names == ["y"]


def test_accounting_seeds_opening_balances() -> None:
    text = (
        "# Cash [Asset]\nbalance: 1,000.50;\n"
        "# Bank [Asset]\n## Later\nbalance: 500;\n"
        "# Loan [Liability]\n"
        "# Pay [Transaction]\n<debit> 10 Loan;\n<credit> 10 Cash;"
    )
    net = _net(text, accounting=True)
    assert net.place_names == ["cash", "bank", "loan"]
    # balances declared under a non-basic morph are not opening balances
    np.testing.assert_allclose(net.get_initial_marking(), [1000.5, 0.0, 0.0])
    assert net.role("loan") == "Liability"


def test_topology_reports_isolated_nodes_and_unseeded_cycles() -> None:
    net = PlaceTransitionNet()
    for name in ("P0", "P1", "P2", "P3"):
        net.add_place(name)
    for name in ("T0", "T1", "T2", "T3"):
        net.add_transition(name)
    net.add_arc("P0", "T0")
    net.add_arc("T0", "P1")
    net.add_arc("P1", "T1")
    net.add_arc("T1", "P0")
    net.add_arc("T3", "P3")

    report = net.topology()
    assert report.isolated_places == ["P2"]
    assert report.isolated_transitions == ["T2"]
    assert report.input_free_transitions == ["T3"]
    assert report.unseeded_cycles == [["P0", "P1"]]
    assert not report.clean


def test_seeded_cycle_is_not_reported() -> None:
    net = PlaceTransitionNet()
    net.add_place("P0", initial_tokens=1)
    net.add_place("P1")
    net.add_transition("T0")
    net.add_transition("T1")
    net.add_arc("P0", "T0")
    net.add_arc("T0", "P1")
    net.add_arc("P1", "T1")
    net.add_arc("T1", "P0")
    report = net.topology()
    assert report.unseeded_cycles == []
    assert report.clean


def test_self_loop_counts_as_cycle() -> None:
    net = _net("# Spin [Transition]\n<has prior_state> A;\n<has post_state> A;", initial_tokens=0)
    assert net.topology().unseeded_cycles == [["a"]]
    seeded = _net("# Spin [Transition]\n<has prior_state> A;\n<has post_state> A;", initial_tokens=1)
    assert seeded.topology().clean


def test_topology_of_graph_built_net() -> None:
    net = _net("# Source [Transition]\n<has post_state> Y;\n# Idle [Transition]")
    report = net.topology()
    assert report.input_free_transitions == ["source"]
    assert report.isolated_transitions == ["idle"]
    assert report.to_dict() == {
        "isolated_places": [],
        "isolated_transitions": ["idle"],
        "input_free_transitions": ["source"],
        "unseeded_cycles": [],
    }


def test_empty_net_topology_is_clean() -> None:
    assert PlaceTransitionNet().topology().clean
