"""Tests for the remember-cursor CLI."""

import json

import pytest
from typer.testing import CliRunner

from fakes import DB_FILE, make_state
from remember_cursor import __version__
from remember_cursor.main import app

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path):
    """A workspace with two documents and three stored positions."""
    (tmp_path / "notes").mkdir()
    (tmp_path / "notes" / "a.md").write_text("# A\n\nfirst\n")
    (tmp_path / "b.md").write_text("second\n")
    db = tmp_path / DB_FILE
    db.parent.mkdir(parents=True)
    db.write_text(
        json.dumps(
            {
                "notes/a.md": make_state(2, 0, 2, 5, scroll=40).to_dict(),
                "b.md": {"scroll": 12},
                "gone.md": make_state(0, 0).to_dict(),
            }
        )
    )
    return tmp_path


def read_db(root):
    return json.loads((root / DB_FILE).read_text())


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestPositions:
    """Tests for `positions` subcommands."""

    def test_list(self, workspace):
        result = runner.invoke(app, ["positions", "list", "--root", str(workspace)])
        assert result.exit_code == 0
        assert "notes/a.md" in result.stdout
        assert "3:1 → 3:6" in result.stdout

    def test_list_empty(self, tmp_path):
        result = runner.invoke(app, ["positions", "list", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "No positions stored" in result.stdout

    def test_root_from_environment(self, workspace):
        result = runner.invoke(
            app, ["positions", "list"], env={"REMEMBER_CURSOR_ROOT": str(workspace)}
        )
        assert result.exit_code == 0
        assert "b.md" in result.stdout

    def test_missing_root(self, tmp_path):
        result = runner.invoke(app, ["positions", "list", "--root", str(tmp_path / "nope")])
        assert result.exit_code == 1

    def test_show(self, workspace):
        result = runner.invoke(app, ["positions", "show", "b.md", "--root", str(workspace)])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"scroll": 12}

    def test_show_unknown(self, workspace):
        result = runner.invoke(app, ["positions", "show", "x.md", "--root", str(workspace)])
        assert result.exit_code == 1

    def test_forget(self, workspace):
        result = runner.invoke(app, ["positions", "forget", "b.md", "--root", str(workspace)])
        assert result.exit_code == 0
        assert "b.md" not in read_db(workspace)
        assert "notes/a.md" in read_db(workspace)

    def test_forget_unknown_leaves_file(self, workspace):
        before = (workspace / DB_FILE).read_text()
        result = runner.invoke(app, ["positions", "forget", "x.md", "--root", str(workspace)])
        assert result.exit_code == 0
        assert (workspace / DB_FILE).read_text() == before

    def test_rename(self, workspace):
        result = runner.invoke(
            app, ["positions", "rename", "b.md", "archive/b.md", "--root", str(workspace)]
        )
        assert result.exit_code == 0
        db = read_db(workspace)
        assert db["archive/b.md"] == {"scroll": 12}
        assert "b.md" not in db

    def test_rename_unknown_creates_nothing(self, workspace):
        runner.invoke(app, ["positions", "rename", "x.md", "y.md", "--root", str(workspace)])
        assert "y.md" not in read_db(workspace)

    def test_prune_dry_run(self, workspace):
        result = runner.invoke(app, ["positions", "prune", "--dry-run", "--root", str(workspace)])
        assert result.exit_code == 0
        assert "gone.md" in result.stdout
        assert "gone.md" in read_db(workspace)

    def test_prune(self, workspace):
        result = runner.invoke(app, ["positions", "prune", "--root", str(workspace)])
        assert result.exit_code == 0
        assert set(read_db(workspace)) == {"notes/a.md", "b.md"}


class TestConfig:
    """Tests for `config` subcommands."""

    def test_show_defaults(self, tmp_path):
        result = runner.invoke(app, ["config", "show", "--root", str(tmp_path)])
        assert result.exit_code == 0
        assert "saveTimer" in result.stdout
        assert "5000" in result.stdout

    def test_set_clamps(self, tmp_path):
        result = runner.invoke(app, ["config", "set", "saveTimer", "100", "--root", str(tmp_path)])
        assert result.exit_code == 0
        data = json.loads((tmp_path / ".remember-cursor" / "data.json").read_text())
        assert data["saveTimer"] == 5000

    def test_set_unknown_key(self, tmp_path):
        result = runner.invoke(app, ["config", "set", "colour", "red", "--root", str(tmp_path)])
        assert result.exit_code == 1

    def test_db_file_name_is_honoured(self, workspace):
        runner.invoke(app, ["config", "set", "dbFileName", "positions.json", "--root", str(workspace)])
        result = runner.invoke(app, ["positions", "list", "--root", str(workspace)])
        assert "No positions stored" in result.stdout


class TestEdit:
    def test_missing_document(self, workspace):
        result = runner.invoke(app, ["edit", "--open", "nope.md", "--root", str(workspace)])
        assert result.exit_code == 1
