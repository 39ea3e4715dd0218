"""Tests for applying add/delete/modify edit operations to a document."""

from __future__ import annotations

from svgir.models.edit_ops import EditOp, EditPlan
from svgir.schema import NodeKind
from svgir.svg import DecodeLimits, parse_svg
from svgir.svg.edit_applier import apply_edits
from svgir.values import Color, Length, Paint
from tests.conftest import TEXT_SVG


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

class TestDelete:
    def test_delete_element(self, smiley_doc):
        changes = apply_edits(smiley_doc, [EditOp(action="delete", target="eye-left")])
        assert changes == ["deleted eye-left"]
        assert smiley_doc.resolve("eye-left") is None
        assert smiley_doc.resolve("eye-right") is not None

    def test_delete_group_removes_descendants(self, smiley_doc):
        apply_edits(smiley_doc, [EditOp(action="delete", target="eyes")])
        assert "eye-left" not in smiley_doc.ids()
        smiley_doc.check_integrity()

    def test_delete_unknown_target(self, smiley_doc):
        changes = apply_edits(smiley_doc, [EditOp(action="delete", target="nose")])
        assert changes == ["skipped delete: unknown target 'nose'"]
        assert smiley_doc.node_count == 6


# ---------------------------------------------------------------------------
# Modify
# ---------------------------------------------------------------------------

class TestModify:
    def test_set_attributes(self, smiley_doc):
        ops = [EditOp(action="modify", target="face", attributes={"fill": "yellow", "r": "11"})]
        changes = apply_edits(smiley_doc, ops)
        face = smiley_doc.resolve("face")
        assert face.get("fill") == Paint(color=Color.keyword("yellow"))
        assert face.get("r") == Length(11)
        assert changes == ["set fill='yellow' on face", "set r='11' on face"]

    def test_empty_value_removes(self, smiley_doc):
        apply_edits(smiley_doc, [EditOp(action="modify", target="face", attributes={"cx": ""})])
        assert smiley_doc.resolve("face").get("cx") is None

    def test_invalid_value_skipped(self, smiley_doc):
        ops = [EditOp(action="modify", target="face", attributes={"fill": "notacolor", "stroke": "red"})]
        changes = apply_edits(smiley_doc, ops)
        face = smiley_doc.resolve("face")
        assert face.get("fill") is None
        assert face.get("stroke") == Paint(color=Color.keyword("red"))
        assert changes[0].startswith("skipped fill on face")

    def test_duplicate_id_skipped(self, smiley_doc):
        changes = apply_edits(smiley_doc, [EditOp(action="modify", target="face", attributes={"id": "mouth"})])
        assert changes[0].startswith("skipped id on face")
        assert smiley_doc.resolve("face") is not None

    def test_delete_wins_over_modify(self, smiley_doc):
        ops = [
            EditOp(action="modify", target="mouth", attributes={"stroke": "red"}),
            EditOp(action="delete", target="mouth"),
        ]
        changes = apply_edits(smiley_doc, ops)
        assert changes == ["skipped modify mouth: target deleted", "deleted mouth"]


# ---------------------------------------------------------------------------
# Add
# ---------------------------------------------------------------------------

class TestAdd:
    def test_add_at_end(self, smiley_doc):
        op = EditOp(action="add", svg_fragment='<circle id="nose" cx="12" cy="12" r="1"/>')
        changes = apply_edits(smiley_doc, [op])
        assert changes == ["added circle#nose to svg"]
        assert smiley_doc.root.children[-1].id == "nose"

    def test_add_after(self, smiley_doc):
        op = EditOp(action="add", position="after:face", svg_fragment='<circle id="nose" r="1"/>')
        apply_edits(smiley_doc, [op])
        assert [c.id for c in smiley_doc.root.children] == ["face", "nose", "eyes", "mouth"]

    def test_add_before_keeps_fragment_order(self, smiley_doc):
        op = EditOp(
            action="add",
            position="before:eye-left",
            svg_fragment='<circle id="a" r="1"/><circle id="b" r="1"/>',
        )
        apply_edits(smiley_doc, [op])
        eyes = smiley_doc.resolve("eyes")
        assert [c.id for c in eyes.children] == ["a", "b", "eye-left", "eye-right"]

    def test_add_into(self, smiley_doc):
        op = EditOp(action="add", position="into:eyes", svg_fragment='<circle id="third" r="1"/>')
        apply_edits(smiley_doc, [op])
        assert smiley_doc.resolve("third").parent is smiley_doc.resolve("eyes")

    def test_add_disallowed_child(self, smiley_doc):
        op = EditOp(action="add", position="into:mouth", svg_fragment='<circle id="bad" r="1"/>')
        changes = apply_edits(smiley_doc, [op])
        assert changes[0].startswith("skipped add circle")
        assert smiley_doc.resolve("bad") is None

    def test_add_duplicate_id(self, smiley_doc):
        op = EditOp(action="add", svg_fragment='<circle id="face" r="1"/>')
        changes = apply_edits(smiley_doc, [op])
        assert changes[0].startswith("skipped add circle")
        assert smiley_doc.node_count == 6

    def test_add_unresolved_position(self, smiley_doc):
        op = EditOp(action="add", position="after:nowhere", svg_fragment='<circle r="1"/>')
        assert apply_edits(smiley_doc, [op]) == ["skipped add: unresolved position 'after:nowhere'"]

    def test_add_empty_fragment(self, smiley_doc):
        assert apply_edits(smiley_doc, [EditOp(action="add", svg_fragment="  ")]) == ["skipped add: empty fragment"]

    def test_add_malformed_fragment(self, smiley_doc):
        changes = apply_edits(smiley_doc, [EditOp(action="add", svg_fragment="<circle")])
        assert changes[0].startswith("skipped add:")
        smiley_doc.check_integrity()

    def test_add_stop_into_gradient(self, gradient_doc):
        op = EditOp(action="add", position="into:grad2", svg_fragment='<stop offset="50%" stop-color="green"/>')
        changes = apply_edits(gradient_doc, [op])
        assert changes == ["added stop to grad2"]
        grad2 = gradient_doc.resolve("grad2")
        assert [c.kind for c in grad2.children] == [NodeKind.STOP]
        assert gradient_doc.gradient_stops(grad2) == list(grad2.children)

    def test_add_character_data_and_tspan_into_text(self):
        doc = parse_svg(TEXT_SVG).document
        op = EditOp(action="add", position="into:hello", svg_fragment=' and <tspan id="more">more</tspan>')
        changes = apply_edits(doc, [op])
        text = doc.resolve("hello")
        assert [c.kind for c in text.children[-2:]] == [NodeKind.CHARACTERS, NodeKind.TSPAN]
        assert text.children[-2].text == " and "
        assert changes[-1] == "added tspan#more to hello"

    def test_add_respects_limits(self, smiley_doc):
        op = EditOp(action="add", svg_fragment="<g><g><g/></g></g>")
        changes = apply_edits(smiley_doc, [op], limits=DecodeLimits(max_depth=3))
        assert changes[0].startswith("skipped add: nesting depth")
        assert smiley_doc.node_count == 6


class TestEditPlan:
    def test_plan_applies_in_order(self, smiley_doc):
        plan = EditPlan(
            reasoning="swap the mouth for a nose",
            operations=[
                EditOp(action="delete", target="mouth"),
                EditOp(action="add", position="after:eyes", svg_fragment='<circle id="nose" r="1"/>'),
            ],
        )
        changes = apply_edits(smiley_doc, plan.operations)
        assert changes == ["deleted mouth", "added circle#nose to svg"]
        assert [c.id for c in smiley_doc.root.children] == ["face", "eyes", "nose"]
