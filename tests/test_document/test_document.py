"""Tests for Document: id index, checked mutation, attribute resolution and integrity."""

from __future__ import annotations

import weakref

import pytest

from svgir.document import Document, E, Node, build_document
from svgir.document.issues import MISSING_ATTRIBUTE, UNRESOLVED_REFERENCE
from svgir.errors import (
    DuplicateIdError,
    IntegrityError,
    SchemaViolation,
    UnresolvedReferenceError,
)
from svgir.schema import NodeKind
from svgir.values import Color, EnumToken, Length, Number, Paint, ViewBox

K = NodeKind


def _snapshot(doc: Document):
    return [(n.kind, n.id) for n in doc.iter_nodes()], sorted(doc.ids())


# ---------------------------------------------------------------------------
# Construction and lookup
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_ids_indexed(self, smiley_doc):
        assert sorted(smiley_doc.ids()) == ["eye-left", "eye-right", "eyes", "face", "mouth"]
        assert smiley_doc.resolve("mouth").kind is K.PATH
        assert smiley_doc.resolve("nope") is None

    def test_node_count(self, smiley_doc):
        assert smiley_doc.node_count == 6

    def test_view_box(self, smiley_doc):
        assert smiley_doc.view_box == ViewBox(0, 0, 24, 24)

    def test_nodes_linked_to_document(self, smiley_doc):
        assert all(n.document is smiley_doc for n in smiley_doc.iter_nodes())

    def test_duplicate_ids_rejected(self):
        with pytest.raises(DuplicateIdError):
            build_document(E.svg(E.g(id="a"), E.g(id="a")))

    def test_root_must_be_detached(self):
        inner = E.g()
        holder = E.svg(inner)
        with pytest.raises(SchemaViolation):
            Document(inner)
        assert inner.parent is holder

    def test_root_must_be_an_element(self):
        with pytest.raises(SchemaViolation):
            Document(Node(K.CHARACTERS, text="x"))


# ---------------------------------------------------------------------------
# Mutation
# ---------------------------------------------------------------------------

class TestMutation:
    def test_insert_indexes_subtree(self, smiley_doc):
        eyes = smiley_doc.resolve("eyes")
        group = E.g(E.circle(id="nose", cx=12, cy=12, r=1), id="extra")
        smiley_doc.insert(eyes, 0, group)
        assert smiley_doc.resolve("nose").parent is group
        assert eyes.children[0] is group
        assert group.document is smiley_doc
        smiley_doc.check_integrity()

    def test_node_append_routes_through_document(self, smiley_doc):
        eyes = smiley_doc.resolve("eyes")
        eyes.append(E.circle(id="third", r=1))
        assert smiley_doc.resolve("third") is not None

    def test_disallowed_child_leaves_document_unchanged(self, smiley_doc):
        before = _snapshot(smiley_doc)
        mouth = smiley_doc.resolve("mouth")
        with pytest.raises(SchemaViolation):
            smiley_doc.insert(mouth, None, E.circle(id="bad", r=1))
        assert _snapshot(smiley_doc) == before

    def test_missing_required_attribute_rejected(self, smiley_doc):
        before = _snapshot(smiley_doc)
        with pytest.raises(SchemaViolation, match="missing required attribute 'width'"):
            smiley_doc.append(smiley_doc.root, E.g(E.rect(height=1), id="wrap"))
        assert _snapshot(smiley_doc) == before

    def test_duplicate_id_leaves_document_unchanged(self, smiley_doc):
        before = _snapshot(smiley_doc)
        with pytest.raises(DuplicateIdError):
            smiley_doc.append(smiley_doc.root, E.g(E.circle(id="face", r=2), id="fresh"))
        assert _snapshot(smiley_doc) == before
        assert smiley_doc.resolve("fresh") is None

    def test_parent_from_another_document(self, smiley_doc):
        other = build_document(E.svg())
        with pytest.raises(SchemaViolation):
            smiley_doc.append(other.root, E.g())

    def test_remove_then_reinsert(self, smiley_doc):
        face = smiley_doc.resolve("face")
        smiley_doc.remove(face)
        assert smiley_doc.resolve("face") is None
        assert face.parent is None and face.document is None
        smiley_doc.append(smiley_doc.root, face)
        assert smiley_doc.resolve("face") is face
        smiley_doc.check_integrity()

    def test_remove_subtree_drops_ids(self, smiley_doc):
        smiley_doc.remove(smiley_doc.resolve("eyes"))
        assert "eye-left" not in smiley_doc.ids()
        assert smiley_doc.node_count == 3

    def test_remove_root_rejected(self, smiley_doc):
        with pytest.raises(SchemaViolation):
            smiley_doc.remove(smiley_doc.root)

    def test_remove_detached_rejected(self, smiley_doc):
        with pytest.raises(SchemaViolation):
            smiley_doc.remove(E.g())

    def test_rename_id(self, smiley_doc):
        face = smiley_doc.resolve("face")
        face.set("id", "head")
        assert smiley_doc.resolve("head") is face
        assert smiley_doc.resolve("face") is None

    def test_rename_to_existing_id(self, smiley_doc):
        face = smiley_doc.resolve("face")
        with pytest.raises(DuplicateIdError):
            face.set("id", "mouth")
        assert face.id == "face"
        assert smiley_doc.resolve("mouth").kind is K.PATH

    def test_remove_id_attribute(self, smiley_doc):
        face = smiley_doc.resolve("face")
        face.remove_attribute("id")
        assert smiley_doc.resolve("face") is None
        smiley_doc.check_integrity()


# ---------------------------------------------------------------------------
# Attribute resolution
# ---------------------------------------------------------------------------

class TestEffectiveValues:
    def test_inherited_from_root(self, smiley_doc):
        eye = smiley_doc.resolve("eye-left")
        assert smiley_doc.effective(eye, "fill") == Paint(color=Color.none())
        assert smiley_doc.effective(eye, "stroke-width") == Length(2)

    def test_explicit_wins(self, smiley_doc):
        eye = smiley_doc.resolve("eye-left")
        eye.set("fill", "red")
        assert smiley_doc.effective(eye, "fill") == Paint(color=Color.keyword("red"))

    def test_default_when_nothing_set(self, smiley_doc):
        face = smiley_doc.resolve("face")
        assert smiley_doc.effective(face, "fill-rule") == EnumToken("nonzero")
        assert smiley_doc.effective(face, "cx") == Length(12)

    def test_non_inheritable_uses_default(self, smiley_doc):
        smiley_doc.resolve("eyes").set("opacity", 0.5)
        assert smiley_doc.effective(smiley_doc.resolve("eye-left"), "opacity") == Number(1)

    def test_explicit_inherit(self, smiley_doc):
        eyes = smiley_doc.resolve("eyes")
        eye = smiley_doc.resolve("eye-left")
        eyes.set("fill", "blue")
        eye.set("fill", "inherit")
        assert smiley_doc.effective(eye, "fill") == Paint(color=Color.keyword("blue"))

    def test_unknown_attribute(self, smiley_doc):
        assert smiley_doc.effective(smiley_doc.root, "data-missing") is None


class TestReferences:
    def test_resolve_paint_server(self, gradient_doc):
        box = gradient_doc.resolve("box")
        assert gradient_doc.resolve_paint(box) is gradient_doc.resolve("grad2")

    def test_resolve_solid_paint(self, gradient_doc):
        box = gradient_doc.resolve("box")
        assert gradient_doc.resolve_paint(box, "stroke") == Color.keyword("red")

    def test_gradient_template_chain(self, gradient_doc):
        grad2 = gradient_doc.resolve("grad2")
        chain = gradient_doc.reference_chain(grad2)
        assert [n.id for n in chain] == ["grad2", "grad1"]
        stops = gradient_doc.gradient_stops(grad2)
        assert len(stops) == 2
        assert all(s.parent is gradient_doc.resolve("grad1") for s in stops)

    def test_paint_fallback(self):
        doc = build_document(E.svg(E.rect(id="r", width=1, height=1, fill="url(#missing) blue")))
        assert doc.resolve_paint(doc.resolve("r")) == Color.keyword("blue")

    def test_unresolved_paint(self):
        doc = build_document(E.svg(E.rect(id="r", width=1, height=1, fill="url(#missing)")))
        with pytest.raises(UnresolvedReferenceError) as exc:
            doc.resolve_paint(doc.resolve("r"))
        assert exc.value.reference == "#missing"

    def test_resolve_reference_text(self, gradient_doc):
        assert gradient_doc.resolve_reference("url(#grad1)").id == "grad1"
        with pytest.raises(UnresolvedReferenceError):
            gradient_doc.resolve_reference("http://example.com/x.svg")

    def test_reference_cycle_terminates(self):
        doc = build_document(
            E.svg(
                E.defs(
                    E.linear_gradient(id="a", href="#b"),
                    E.linear_gradient(id="b", href="#a"),
                )
            )
        )
        chain = doc.reference_chain(doc.resolve("a"))
        assert [n.id for n in chain] == ["a", "b"]
        assert doc.gradient_stops(doc.resolve("a")) == []


# ---------------------------------------------------------------------------
# Validation and integrity
# ---------------------------------------------------------------------------

class TestValidation:
    def test_valid_document(self, gradient_doc):
        assert gradient_doc.validate() == []

    def test_unresolved_reference_reported(self):
        doc = build_document(E.svg(E.g(E.rect(width=1, height=1), clip_path="url(#nowhere)")))
        issues = doc.validate()
        assert [i.code for i in issues] == [UNRESOLVED_REFERENCE]
        assert issues[0].attribute == "clip-path"

    def test_missing_attribute_reported(self):
        root = E.svg()
        root.append(E.circle(cx=1))
        doc = build_document(root)
        assert [i.code for i in doc.validate()] == [MISSING_ATTRIBUTE]


class TestIntegrity:
    def test_consistent_after_edits(self, smiley_doc):
        smiley_doc.remove(smiley_doc.resolve("mouth"))
        smiley_doc.append(smiley_doc.resolve("eyes"), E.circle(id="pupil", r=0.5))
        smiley_doc.check_integrity()

    def test_stale_index_detected(self, smiley_doc):
        smiley_doc._index["ghost"] = weakref.ref(smiley_doc.resolve("face"))
        with pytest.raises(IntegrityError):
            smiley_doc.check_integrity()
        with pytest.raises(IntegrityError):
            smiley_doc.resolve("ghost")

    def test_detached_node_keeps_no_document(self, smiley_doc):
        eyes = smiley_doc.remove(smiley_doc.resolve("eyes"))
        assert all(n.document is None for n in eyes.iter())
