"""Golden tests for the validation rules."""

from bowtie.graph import BowtieGraph, build_graph
from bowtie.models import Event
from bowtie.parser import iter_records
from bowtie.results import Invalid, Ok
from bowtie.rules import RULE_EXPLANATIONS, ValidationRules, get_rule_ids, validate_graph


def _graph(text: str) -> BowtieGraph:
    return build_graph(iter_records(text))


def test_sample_has_no_findings(chemical_spillage_graph: BowtieGraph):
    assert ValidationRules(chemical_spillage_graph).run_all() == []


def test_duplicate_cause_names_side_and_name():
    rules = ValidationRules(_graph("cause A\ncause B\ncause A\nevent E\n"))
    results = rules.check_duplicate_nodes()

    assert len(results) == 1
    assert results[0].rule == "duplicate-node"
    assert results[0].kind == "validation"
    assert results[0].subject == "A"
    assert results[0].side == "cause"
    assert results[0].line == 3
    assert "cause" in results[0].message and "'A'" in results[0].message


def test_duplicate_consequence_names():
    rules = ValidationRules(_graph("event E\nconsequence X\nconsequence X\n"))
    results = rules.check_duplicate_nodes()

    assert [(r.subject, r.side) for r in results] == [("X", "consequence")]


def test_same_name_on_both_sides_is_not_a_duplicate():
    rules = ValidationRules(_graph("cause Leak\nevent E\nconsequence Leak\n"))
    assert rules.check_duplicate_nodes() == []


def test_node_names_are_case_sensitive():
    rules = ValidationRules(_graph("cause Leak\ncause leak\nevent E\n"))
    assert rules.check_duplicate_nodes() == []


def test_unresolved_target():
    rules = ValidationRules(_graph("cause A\nevent E\nbarrier X: Ghost\n"))
    results = rules.check_barrier_targets()

    assert len(results) == 1
    assert results[0].rule == "unresolved-target"
    assert results[0].subject == "Ghost"
    assert "'X'" in results[0].message and "'Ghost'" in results[0].message


def test_ambiguous_target_is_rejected():
    rules = ValidationRules(_graph("cause Leak\nevent E\nconsequence Leak\nbarrier Seal: Leak\n"))
    results = rules.check_barrier_targets()

    assert len(results) == 1
    assert results[0].rule == "ambiguous-target"
    assert results[0].subject == "Leak"


def test_untargeted_ambiguous_name_is_legal():
    rules = ValidationRules(_graph("cause Leak\nevent E\nconsequence Leak\n"))
    assert rules.run_all() == []


def test_disjoint_barrier_redeclaration_is_allowed():
    rules = ValidationRules(_graph("cause A\ncause B\nevent E\nbarrier X: A\nbarrier X: B\n"))
    assert rules.check_duplicate_barriers() == []


def test_overlapping_barrier_redeclaration():
    rules = ValidationRules(_graph("cause A\ncause B\nevent E\nbarrier X: A\nbarrier X: B, A\n"))
    results = rules.check_duplicate_barriers()

    assert len(results) == 1
    assert results[0].rule == "duplicate-barrier"
    assert results[0].subject == "X"
    assert results[0].line == 5


def test_repeated_target_within_one_barrier():
    rules = ValidationRules(_graph("cause A\nevent E\nbarrier X: A, A\n"))
    results = rules.check_duplicate_barriers()

    assert [r.rule for r in results] == ["duplicate-target"]


def test_reserved_characters_in_names():
    rules = ValidationRules(_graph("cause Fire, Smoke\nevent E\nbarrier Alarm, Sprinkler: E2\nconsequence Loss\n"))
    results = rules.check_reserved_characters()

    subjects = {(r.subject, r.side) for r in results}
    assert subjects == {("Fire, Smoke", "cause"), ("Alarm, Sprinkler", None)}
    assert all(r.rule == "reserved-character" for r in results)


def test_event_count_on_hand_built_graph():
    graph = BowtieGraph(events=(Event("A", 1), Event("B", 2)))
    results = ValidationRules(graph).check_event_count()

    assert len(results) == 1
    assert results[0].rule == "event-count"
    assert results[0].line == 2

    assert ValidationRules(BowtieGraph()).check_event_count()[0].rule == "event-count"


def test_run_all_accumulates_every_defect():
    text = "\n".join(
        [
            "cause A",
            "cause A",
            "cause Leak",
            "event E",
            "consequence Leak",
            "barrier X: Ghost",
            "barrier Y: Leak",
            "barrier Z: A, Phantom",
        ]
    )
    results = ValidationRules(_graph(text)).run_all()

    rule_names = [r.rule for r in results]
    assert rule_names.count("duplicate-node") == 1
    assert rule_names.count("ambiguous-target") == 1
    assert rule_names.count("unresolved-target") == 2
    assert {r.subject for r in results if r.rule == "unresolved-target"} == {"Ghost", "Phantom"}


def test_validate_graph_result_types(chemical_spillage_graph: BowtieGraph):
    assert isinstance(validate_graph(chemical_spillage_graph), Ok)

    invalid = validate_graph(_graph("cause A\nevent E\nbarrier X: Ghost\n"))
    assert isinstance(invalid, Invalid)
    assert len(invalid.diagnostics) == 1


def test_every_rule_is_explained():
    assert "ambiguous-target" in get_rule_ids()
    assert all(text for text in RULE_EXPLANATIONS.values())
