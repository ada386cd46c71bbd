"""
`uic annotate` end-to-end tests.

Test Coverage:
--------------
1. Dry run prints diffs to stdout and a summary to stderr
2. --write modifies files and discards the backup
3. --json emits the camelCase result
4. Manifest failures exit 1 with a hint
5. A failed write restores every file
6. Unreadable source warnings and --quiet
"""

import json
import logging
from pathlib import Path

import pytest

from ..annotator import engine
from .main import build_parser, main


PAGE = "<main>\n  <button>Go</button>\n</main>\n"


@pytest.fixture(autouse=True)
def restore_root_logging():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def project(tmp_path: Path, monkeypatch):
    """Two source files and a manifest naming one element in each."""
    monkeypatch.chdir(tmp_path)
    src = tmp_path / "src"
    src.mkdir()
    (src / "page.tsx").write_text(PAGE, encoding="utf-8")
    (src / "form.tsx").write_text("<form>\n  <input />\n</form>\n", encoding="utf-8")

    manifest = {
        "schemaVersion": "1.0",
        "elements": [
            {
                "agentId": "home.go.button",
                "type": "button",
                "filePath": "src/page.tsx",
                "line": 2,
                "column": 3,
            },
            {
                "agentId": "home.email.input",
                "type": "input",
                "filePath": "src/form.tsx",
                "line": 2,
                "column": 3,
            },
        ],
    }
    (tmp_path / "manifest.json").write_text(json.dumps(manifest), encoding="utf-8")
    return tmp_path


class TestParser:
    """Argument handling."""

    def test_defaults(self):
        args = build_parser().parse_args(["annotate"])
        assert args.manifest == "manifest.json"
        assert args.write is False
        assert args.dry_run is False
        assert args.backup_dir == ".uic-backup"
        assert args.json is False

    def test_dry_run_and_write_conflict(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["annotate", "--dry-run", "--write"])
        assert exc_info.value.code == 2

    def test_command_required(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2


class TestDryRun:
    """Default mode."""

    def test_prints_diffs(self, project, capsys):
        assert main(["annotate"]) == 0
        out, err = capsys.readouterr()

        assert "--- a/src/page.tsx" in out
        assert '+  <button data-agent-id="home.go.button">Go</button>' in out
        assert "--- a/src/form.tsx" in out

        blocks = out.rstrip("\n").split("\n\n")
        assert len(blocks) == 2
        assert blocks[0].startswith("--- a/src/page.tsx\n")
        assert blocks[1].startswith("--- a/src/form.tsx\n")
        assert "\n\n\n" not in out
        assert "Dry run: 2 annotation(s) would be applied across 2 file(s)." in err
        assert "Run with --write to apply changes." in err

    def test_files_untouched(self, project, capsys):
        main(["annotate", "--dry-run"])
        assert (project / "src" / "page.tsx").read_text() == PAGE
        assert not (project / ".uic-backup").exists()

    def test_nothing_to_do(self, project, capsys):
        main(["annotate", "--write"])
        capsys.readouterr()

        assert main(["annotate"]) == 0
        out, _ = capsys.readouterr()
        assert "No changes needed (all annotations already present)." in out


class TestWrite:
    """--write mode."""

    def test_modifies_files(self, project, capsys):
        assert main(["annotate", "--write"]) == 0
        assert (project / "src" / "page.tsx").read_text() == (
            '<main>\n  <button data-agent-id="home.go.button">Go</button>\n</main>\n'
        )
        assert 'data-agent-id="home.email.input"' in (project / "src" / "form.tsx").read_text()

    def test_summary_and_backup_removed(self, project, capsys):
        main(["annotate", "--write", "--backup-dir", "bk"])
        _, err = capsys.readouterr()

        assert "Annotated 2 file(s)" in err
        assert "Annotations applied: 2" in err
        assert "Annotations skipped: 0" in err
        assert not (project / "bk").exists()

    def test_already_annotated(self, project, capsys):
        main(["annotate", "--write"])
        capsys.readouterr()

        assert main(["annotate", "--write"]) == 0
        out, _ = capsys.readouterr()
        assert "No files need modification (all annotations already present)." in out

    def test_failed_write_restores_files(self, project, capsys, monkeypatch):
        real_write = engine.write_source

        def flaky_write(file_path, content):
            if file_path.endswith("form.tsx"):
                raise OSError("read-only file system")
            real_write(file_path, content)

        monkeypatch.setattr(engine, "write_source", flaky_write)

        assert main(["annotate", "--write", "--backup-dir", "bk"]) == 1
        _, err = capsys.readouterr()

        assert "Restored original files from backup." in err
        assert (project / "src" / "page.tsx").read_text() == PAGE
        assert not (project / "bk").exists()


class TestJsonOutput:
    """--json mode."""

    def test_dry_run_json(self, project, capsys):
        assert main(["annotate", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)

        assert data["totalApplied"] == 2
        assert data["totalSkipped"] == 0
        assert data["backup"] is None
        assert data["files"][0]["patch"]["filePath"] == "src/page.tsx"

    def test_write_json_reports_discarded_backup(self, project, capsys):
        assert main(["annotate", "--json", "--write", "--backup-dir", "bk"]) == 0
        data = json.loads(capsys.readouterr().out)

        assert data["totalApplied"] == 2
        assert data["backup"] is None
        assert not (project / "bk").exists()
        assert 'data-agent-id="home.go.button"' in (project / "src" / "page.tsx").read_text()

    def test_empty_manifest_json(self, tmp_path: Path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "manifest.json").write_text(
            json.dumps({"schemaVersion": "1.0", "elements": []}), encoding="utf-8"
        )
        assert main(["annotate", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data == {"files": [], "totalApplied": 0, "totalSkipped": 0, "backup": None}


class TestManifestErrors:
    """Manifest problems."""

    def test_missing_manifest(self, tmp_path: Path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        assert main(["annotate"]) == 1
        _, err = capsys.readouterr()
        assert "Error: Failed to load manifest" in err
        assert "--manifest <path>" in err

    def test_empty_manifest(self, tmp_path: Path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"schemaVersion": "1.0", "elements": []}), encoding="utf-8")

        assert main(["annotate", "--manifest", str(path)]) == 0
        out, _ = capsys.readouterr()
        assert "No elements to annotate." in out


class TestUnreadableSource:
    """A manifest entry whose file cannot be read."""

    @pytest.fixture
    def manifest_with_missing_file(self, project):
        path = project / "manifest.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        data["elements"].append(
            {
                "agentId": "gone.button",
                "type": "button",
                "filePath": "src/missing.tsx",
                "line": 1,
                "column": 1,
            }
        )
        path.write_text(json.dumps(data), encoding="utf-8")
        return project

    def test_warning_names_file(self, manifest_with_missing_file, capsys):
        assert main(["annotate"]) == 0
        _, err = capsys.readouterr()
        assert "[uic] [WARNING] Could not read" in err
        assert "missing.tsx" in err
        assert "Dry run: 2 annotation(s) would be applied across 2 file(s)." in err

    def test_quiet_hides_warning(self, manifest_with_missing_file, capsys):
        assert main(["-q", "annotate"]) == 0
        _, err = capsys.readouterr()
        assert "missing.tsx" not in err

    def test_quiet_help_mentions_hidden_warnings(self):
        help_text = " ".join(build_parser().format_help().split())
        assert "hides warnings about unreadable source files" in help_text
