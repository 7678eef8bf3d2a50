"""Unit tests for the history module."""

import pytest

from zplgrid.ops import set_template_name
from zplgrid.schema import default_template

from .lib import can_redo, can_undo, make_history, push, redo, reset, undo


class TestHistory:
    """Tests for push/undo/redo/reset."""

    @pytest.mark.unit
    def test_make_history(self):
        h = make_history("a")
        assert h.present == "a"
        assert h.past == ()
        assert h.future == ()
        assert not can_undo(h)
        assert not can_redo(h)

    @pytest.mark.unit
    def test_push_same_value_is_noop(self):
        doc = default_template()
        h = make_history(doc)
        assert push(h, doc) is h

    @pytest.mark.unit
    def test_push_equal_but_distinct_value_records(self):
        """Identity, not equality, decides whether a push is recorded."""
        h = make_history(default_template())
        h2 = push(h, default_template())
        assert h2 is not h
        assert len(h2.past) == 1

    @pytest.mark.unit
    def test_undo_redo(self):
        h = push(push(make_history("a"), "b"), "c")
        assert h.past == ("a", "b")

        h = undo(h)
        assert h.present == "b"
        assert h.future == ("c",)

        h = undo(h)
        assert h.present == "a"
        assert h.future == ("b", "c")
        assert undo(h) is h

        h = redo(h)
        assert h.present == "b"
        assert h.past == ("a",)
        assert h.future == ("c",)

    @pytest.mark.unit
    def test_redo_without_future_is_noop(self):
        h = make_history("a")
        assert redo(h) is h

    @pytest.mark.unit
    def test_push_truncates_future(self):
        h = undo(push(push(make_history("a"), "b"), "c"))
        h = push(h, "d")
        assert h.past == ("a", "b")
        assert h.present == "d"
        assert h.future == ()
        assert not can_redo(h)

    @pytest.mark.unit
    def test_reset(self):
        h = push(make_history("a"), "b")
        h = reset(h, "z")
        assert (h.past, h.present, h.future) == ((), "z", ())

    @pytest.mark.unit
    def test_with_documents(self):
        doc = default_template()
        renamed = set_template_name(doc, "Bin")
        h = undo(push(make_history(doc), renamed))
        assert h.present is doc
        assert redo(h).present is renamed
