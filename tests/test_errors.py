"""Tests for toru.errors: error kinds and messages."""

from __future__ import annotations

import pytest

from toru.errors import AmbiguousNameError, InternalError, NotFoundError, RecordError, ToruError, UserError


# ── Error hierarchy ──────────────────────────────────────────────


class TestErrorKinds:

    @pytest.mark.parametrize("kind", [UserError, NotFoundError, InternalError, RecordError])
    def test_all_are_toru_errors(self, kind):
        assert issubclass(kind, ToruError)

    def test_user_and_internal_are_distinct(self):
        assert not issubclass(InternalError, UserError)
        assert not issubclass(RecordError, UserError)
        assert issubclass(NotFoundError, UserError)

    def test_ambiguous_lists_sorted_ids(self):
        exc = AmbiguousNameError("groceries", [7, 3])
        assert isinstance(exc, UserError)
        assert exc.ids == [3, 7]
        assert str(exc) == "Multiple tasks (ids: [3, 7]) by the name 'groceries' exist"
