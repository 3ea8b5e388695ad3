"""Tests for the Textual editor host."""

import json

import pytest
from textual.widgets.text_area import Selection

from fakes import DB_FILE, make_state
from remember_cursor.config.settings import Settings
from remember_cursor.services.events import SHUTDOWN
from remember_cursor.ui.editor_app import CursorEditorApp, find_heading_line
from remember_cursor.ui.protocols import EditorHost

DOCUMENT = "\n".join(f"line {n}" for n in range(40)) + "\n## Details\nmore\n"


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "notes").mkdir()
    (tmp_path / "notes" / "a.md").write_text(DOCUMENT)
    (tmp_path / "b.md").write_text("short\n")
    db = tmp_path / DB_FILE
    db.parent.mkdir(parents=True)
    db.write_text(json.dumps({"notes/a.md": make_state(5, 2, 5, 4).to_dict()}))
    return tmp_path


def make_app(root, initial=None):
    return CursorEditorApp(root, Settings(delay_after_file_opening=0), initial=initial)


class TestFindHeading:
    def test_finds_heading(self):
        assert find_heading_line(DOCUMENT, "details") == 40

    def test_missing_heading(self):
        assert find_heading_line(DOCUMENT, "Summary") is None


class TestEditorApp:
    """Tests for CursorEditorApp."""

    def test_is_an_editor_host(self, workspace):
        assert isinstance(make_app(workspace), EditorHost)

    @pytest.mark.asyncio
    async def test_restores_on_open(self, workspace):
        app = make_app(workspace, initial="notes/a.md")
        async with app.run_test() as pilot:
            await pilot.pause(0.3)
            assert app.active_document_id() == "notes/a.md"
            assert app.editor.selection == Selection((5, 2), (5, 4))

    @pytest.mark.asyncio
    async def test_heading_link_wins_over_restore(self, workspace):
        app = make_app(workspace, initial="notes/a.md#Details")
        async with app.run_test() as pilot:
            await pilot.pause(0.3)
            assert app.editor.selection == Selection.cursor((40, 0))

    @pytest.mark.asyncio
    async def test_open_document_without_position(self, workspace):
        app = make_app(workspace)
        async with app.run_test() as pilot:
            app.open_document("b.md")
            await pilot.pause(0.3)
            assert app.active_document_id() == "b.md"
            assert app.editor.text == "short\n"

    @pytest.mark.asyncio
    async def test_rename_carries_position(self, workspace):
        app = make_app(workspace, initial="notes/a.md")
        async with app.run_test() as pilot:
            await pilot.pause(0.3)
            assert app.rename_document("notes/a.md", "archive/a.md") is True
            assert app.active_document_id() == "archive/a.md"
            assert (workspace / "archive" / "a.md").is_file()
            assert "notes/a.md" not in app.store.working
            assert app.store.get("archive/a.md") is not None

    @pytest.mark.asyncio
    async def test_delete_forgets_position(self, workspace):
        app = make_app(workspace, initial="notes/a.md")
        async with app.run_test() as pilot:
            await pilot.pause(0.3)
            assert app.delete_document("notes/a.md") is True
            assert app.active_document_id() is None
            assert not (workspace / "notes" / "a.md").exists()
            assert app.store.get("notes/a.md") is None

    @pytest.mark.asyncio
    async def test_shutdown_flushes(self, workspace):
        app = make_app(workspace, initial="b.md")
        async with app.run_test() as pilot:
            await pilot.pause(0.3)
            caret = make_state(0, 3).cursor
            app.set_selection(caret.start, caret.end)
            await pilot.pause(0.3)
            await app.dispatcher.emit_async(SHUTDOWN)

        stored = json.loads((workspace / DB_FILE).read_text())
        assert stored["b.md"]["cursor"]["from"] == {"line": 0, "ch": 3}
