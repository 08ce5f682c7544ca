"""Integration tests for the full translate_yuml pipeline.

These tests exercise directives -> split -> parse -> render end-to-end.
"""
from __future__ import annotations

import pytest

from yuml_dot import DirectiveError, TranslateOptions, translate_yuml, yuml_to_dot


CLASS_DIAGRAM = """\
// {type:class}
// {direction:topDown}
// {generate:true}

[note: You can stick notes on diagrams too!{bg:cornsilk}]
[Customer]<>1-orders 0..*>[Order]
[Order]++*-*>[LineItem]
[Order]-1>[DeliveryMethod]
[Order]*-*>[Product|EAN_Code|promo_price()]
[Category]<->[Product]
[DeliveryMethod]^[National]
[DeliveryMethod]^[International]
"""

ACTIVITY_DIAGRAM = """\
// {type:activity}
(start)-><a>[kettle empty]->(Fill Kettle)->|b|
<a>[kettle full]->|b|->(Boil Kettle)->|c|
|b|->(Add Tea Bag)->(Add Milk)->|c|->(Pour Water)
(Pour Water)->(end)
"""


def node_lines(dot: str) -> list[str]:
    return [line for line in dot.splitlines() if line.startswith("  A") and " -> " not in line]


def edge_lines(dot: str) -> list[str]:
    return [line for line in dot.splitlines() if " -> " in line]


# ============================================================================
# Basic translation
# ============================================================================


class TestBasic:
    def test_cardinality_example(self):
        dot = yuml_to_dot("[Customer]1-0..*>[Order]", family="class")
        nodes = node_lines(dot)
        assert len(nodes) == 2
        assert 'shape="rectangle"' in nodes[0]
        assert 'label="Customer"' in nodes[0]
        assert 'label="Order"' in nodes[1]
        (edge,) = edge_lines(dot)
        assert edge.startswith("  A1 -> A2 [")
        assert 'arrowtail="none"' in edge
        assert 'arrowhead="vee"' in edge
        assert 'taillabel="1"' in edge
        assert 'headlabel="0..*"' in edge

    def test_activity_example(self):
        dot = yuml_to_dot("(start)->[Fill Kettle]", family="activity")
        nodes = node_lines(dot)
        assert 'shape="circle"' in nodes[0]
        assert 'shape="rectangle"' in nodes[1]
        assert 'label="Fill Kettle"' in nodes[1]
        (edge,) = edge_lines(dot)
        assert 'arrowhead="vee"' in edge

    def test_note_example(self):
        result = translate_yuml("[This is a note]{bg:cornsilk}", family="class")
        (entity,) = result.diagram.entities.values()
        assert entity.kind == "note"
        assert entity.fill == "cornsilk"
        assert 'fillcolor="cornsilk"' in result.dot

    def test_type_directive_selects_family(self):
        result = translate_yuml("// {type:activity}\n(start)->(end)")
        assert result.diagram.family == "activity"
        assert result.ok

    def test_empty_document(self):
        dot = yuml_to_dot("// {type:class}\n")
        assert dot.startswith("digraph G {\n")
        assert dot.endswith("  rankdir = TB\n}\n")


# ============================================================================
# Full diagrams
# ============================================================================


class TestFullDiagrams:
    def test_class_diagram(self):
        result = translate_yuml(CLASS_DIAGRAM)
        assert result.diagnostics == []
        labels = [e.label for e in result.diagram.entities.values()]
        assert labels[:3] == ["You can stick notes on diagrams too!", "Customer", "Order"]
        assert len(result.diagram.edges) == 7
        assert "<TD PORT=\"f1\">EAN_Code</TD>" in result.dot

    def test_class_diagram_operators(self):
        edges = translate_yuml(CLASS_DIAGRAM).diagram.edges
        assert (edges[0].arrowtail, edges[0].taillabel) == ("odiamond", "1")
        assert (edges[0].arrowhead, edges[0].headlabel) == ("vee", "orders 0..*")
        assert edges[1].arrowtail == "diamond"
        assert edges[4].arrowtail == edges[4].arrowhead == "vee"
        assert edges[5].arrowtail == "empty"

    def test_activity_diagram(self):
        result = translate_yuml(ACTIVITY_DIAGRAM)
        assert result.diagnostics == []
        kinds = [e.kind for e in result.diagram.entities.values()]
        assert kinds.count("bar") == 2
        assert kinds.count("diamond") == 1
        assert kinds[0] == "circle"
        assert kinds[-1] == "doublecircle"

    def test_activity_guards_become_labels(self):
        dot = yuml_to_dot(ACTIVITY_DIAGRAM)
        assert 'label="[kettle empty]"' in dot
        assert 'label="[kettle full]"' in dot

    def test_activity_bar_ports(self):
        dot = yuml_to_dot(ACTIVITY_DIAGRAM)
        # |b| is entered from Fill Kettle and from the decision
        assert ':f1:n [' in dot
        assert ':f2:n [' in dot
        assert 'label="<f1>|<f2>"' in dot

    def test_association_class(self):
        dot = yuml_to_dot("[Student]-[Course][Enrolment]", family="class")
        assert '  A1JA2 [shape="point", style="invis"' in dot
        assert "{ rank=same; A3 -> A1JA2 [" in dot

    def test_left_to_right(self):
        dot = yuml_to_dot(
            "(a)->|b|", family="activity", options=TranslateOptions(direction="LR")
        )
        assert "rankdir = LR" in dot
        assert "A2:f1:w [" in dot


# ============================================================================
# Determinism & recovery
# ============================================================================


class TestDeterminism:
    def test_repeated_translation_is_byte_identical(self):
        assert yuml_to_dot(CLASS_DIAGRAM) == yuml_to_dot(CLASS_DIAGRAM)
        assert yuml_to_dot(ACTIVITY_DIAGRAM) == yuml_to_dot(ACTIVITY_DIAGRAM)

    def test_identifiers_restart_per_translation(self):
        yuml_to_dot("[X]->[Y]", family="class")
        dot = yuml_to_dot("[P]", family="class")
        assert '  A1 [shape="rectangle", margin="0.20,0.05", label="P"' in dot


class TestRecovery:
    def test_one_bad_statement_among_valid_ones(self):
        result = translate_yuml("[A]->[B]\n[C]->[D\n[E]->[F]", family="class")
        assert [e.label for e in result.diagram.entities.values()] == ["A", "B", "E", "F"]
        assert len(result.diagram.edges) == 2
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].line == 2
        assert not result.ok

    def test_bad_statement_does_not_swallow_the_rest_of_the_line(self):
        result = translate_yuml("[C]->[D, [E]->[F]", family="class")
        assert len(result.diagram.edges) == 1
        assert len(result.diagnostics) == 1

    def test_unsupported_type_is_fatal(self):
        with pytest.raises(DirectiveError):
            translate_yuml("// {type:usecase}\n[User]-(Login)")

    def test_missing_type_is_fatal(self):
        with pytest.raises(DirectiveError):
            translate_yuml("[A]->[B]")
