# Tests for files/navigation.py and files/selection.py
# Created: 2026-10-19

import pytest

from peanutfm.files.models import DisplayEntry, EntryKind
from peanutfm.files.navigation import NavigationState, join_path, parse_path
from peanutfm.files.selection import (
    BACKGROUND_ACTIONS,
    ContextAction,
    RenameState,
    SelectionState,
    TargetKind,
    available_actions,
)


def _row(name, kind=EntryKind.FILE):
    return DisplayEntry(
        id=name,
        name=name,
        kind=kind,
        size_label="-",
        mime_type="",
        mime_class="unknown",
        modified_label="",
    )


class TestNavigationState:
    def test_starts_at_root(self):
        nav = NavigationState()
        assert nav.segments == ()
        assert nav.path == ""
        assert nav.at_root

    def test_ascend_at_root_is_noop(self):
        nav = NavigationState()
        assert nav.ascend() is False
        assert nav.segments == ()

    def test_descend_then_ascend_round_trip(self):
        nav = NavigationState(["docs"])
        before = nav.segments
        nav.descend("sub")
        assert nav.segments == ("docs", "sub")
        assert nav.path == "docs/sub"
        assert nav.ascend() is True
        assert nav.segments == before

    @pytest.mark.parametrize("bad", ["", "a/b"])
    def test_rejects_invalid_segments(self, bad):
        nav = NavigationState()
        with pytest.raises(ValueError):
            nav.descend(bad)
        with pytest.raises(ValueError):
            NavigationState([bad])

    def test_reset(self):
        nav = NavigationState(["a", "b"])
        nav.reset(["c"])
        assert nav.segments == ("c",)

    def test_generations(self):
        nav = NavigationState()
        first = nav.begin_request()
        second = nav.begin_request()
        assert second == first + 1
        assert nav.is_current(second)
        assert not nav.is_current(first)


class TestPathHelpers:
    def test_parse_path(self):
        assert parse_path("/docs//sub/") == ("docs", "sub")
        assert parse_path("/") == ()
        assert parse_path("") == ()

    def test_join_path(self):
        assert join_path(("docs", "sub")) == "docs/sub"
        assert join_path(()) == ""


class TestSelectionState:
    def test_entry_then_dismiss(self):
        sel = SelectionState()
        sel.open_on_entry("a.txt")
        assert sel.target.kind is TargetKind.ENTRY
        assert sel.target.entry_id == "a.txt"
        sel.dismiss()
        assert sel.target.kind is TargetKind.NONE

    def test_background_clears_target(self):
        sel = SelectionState()
        sel.open_on_entry("a.txt")
        sel.open_on_background()
        assert not sel.target.is_entry

    def test_consume(self):
        sel = SelectionState()
        sel.open_on_entry("a.txt")
        target = sel.consume()
        assert target.entry_id == "a.txt"
        assert not sel.target.is_entry


class TestAvailableActions:
    def test_background(self):
        assert available_actions(None) == BACKGROUND_ACTIONS

    def test_file_offers_download_and_link(self):
        actions = available_actions(_row("a.txt"))
        assert ContextAction.DOWNLOAD in actions
        assert ContextAction.COPY_LINK in actions

    def test_directory_has_no_download_or_link(self):
        actions = available_actions(_row("sub", EntryKind.DIRECTORY))
        assert ContextAction.OPEN in actions
        assert ContextAction.DOWNLOAD not in actions
        assert ContextAction.COPY_LINK not in actions


class TestRenameState:
    def test_lifecycle(self):
        state = RenameState()
        assert not state.active
        state.begin("a.txt")
        assert state.active_id == "a.txt"
        assert state.finish() == "a.txt"
        assert state.active_id is None

    def test_single_active(self):
        state = RenameState()
        state.begin("a.txt")
        state.begin("b.txt")
        assert state.active_id == "b.txt"

    def test_reconcile_clears_missing(self):
        state = RenameState()
        state.begin("gone.txt")
        assert state.reconcile({"a.txt"}) is True
        assert state.active_id is None

    def test_reconcile_keeps_present(self):
        state = RenameState()
        state.begin("a.txt")
        assert state.reconcile({"a.txt"}) is False
        assert state.active_id == "a.txt"
