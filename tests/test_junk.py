"""Tests for junk file matching, scanning and deletion."""

from __future__ import annotations

from pathlib import Path

import pytest

from workspace_analyser.core.errors import WorkspaceNotFoundError
from workspace_analyser.core.junk import (
    DEFAULT_PATTERNS,
    JunkScanner,
    default_patterns,
    delete_junk,
    is_junk,
    load_patterns,
    match_pattern,
    save_patterns,
    scan_for_junk,
)
from workspace_analyser.models.junk_pattern import JunkPattern
from workspace_analyser.settings import Settings


@pytest.fixture
def junk_tree(tmp_path):
    """A controller directory with a mix of junk and real files."""
    root = tmp_path / "ctrl"
    (root / "upl").mkdir(parents=True)
    (root / "ust.xml").touch()
    (root / "main.utf").write_bytes(b"u" * 40)
    (root / "MAINBDF.MOT").write_bytes(b"m" * 10)
    (root / "old.bak").write_bytes(b"b" * 20)
    (root / "upl" / "x.TMP").write_bytes(b"t" * 30)
    (root / "upl" / "keep.bak.txt").write_bytes(b"k" * 5)
    return root


class TestIsJunk:
    def test_wildcard_enabled(self):
        assert is_junk("backup.bak", [JunkPattern("*.bak", "Backup files", enabled=True)])

    def test_wildcard_disabled(self):
        assert not is_junk("backup.bak", [JunkPattern("*.bak", "Backup files", enabled=False)])

    def test_exact_case_insensitive(self):
        assert is_junk("MAINBDF.MOT", [JunkPattern("mainbdf.mot", "Motion definition file")])

    def test_wildcard_case_insensitive(self):
        assert is_junk("Backup.BAK", [JunkPattern("*.bak")])

    def test_exact_requires_full_name(self):
        patterns = [JunkPattern("fupliste.xml")]
        assert not is_junk("my_fupliste.xml", patterns)
        assert not is_junk("fupliste.xmlpl", patterns)

    def test_wildcard_is_suffix_only(self):
        assert not is_junk("file.bak.txt", [JunkPattern("*.bak")])

    def test_bare_star_dot_matches_nothing_by_suffix(self):
        assert not is_junk("trailing.", [JunkPattern("*.")])

    def test_no_patterns(self):
        assert not is_junk("backup.bak", None)
        assert not is_junk("backup.bak", [])

    def test_full_path_uses_file_name(self):
        assert is_junk("/some/dir/Old.Sav", [JunkPattern("*.sav")])
        assert not is_junk("/some/mainbdf.mot/file.txt", [JunkPattern("mainbdf.mot")])

    def test_any_pattern_matches(self):
        patterns = [JunkPattern("*.tmp", enabled=False), JunkPattern("*.tmp", "second")]
        assert match_pattern("a.tmp", patterns).description == "second"

    def test_default_patterns(self):
        names = [p.pattern for p in DEFAULT_PATTERNS]
        assert len(names) == 11
        assert "*.bak" in names and "fupblattliste.mnu" in names
        assert all(p.enabled for p in DEFAULT_PATTERNS)

    def test_default_patterns_are_fresh_copies(self):
        first = default_patterns()
        first[0].enabled = False
        assert default_patterns()[0].enabled


class TestScanForJunk:
    def test_finds_matches_recursively(self, junk_tree):
        result = scan_for_junk(junk_tree, default_patterns())

        found = {e.path for e in result.entries}
        assert found == {
            junk_tree / "MAINBDF.MOT",
            junk_tree / "old.bak",
            junk_tree / "upl" / "x.TMP",
        }
        assert result.total_bytes == 60
        assert result.root == junk_tree

    def test_entries_carry_pattern_info(self, junk_tree):
        result = scan_for_junk(junk_tree, [JunkPattern("*.bak", "Backup files")])
        assert len(result.entries) == 1
        entry = result.entries[0]
        assert entry.pattern == "*.bak"
        assert entry.description == "Backup files"
        assert entry.size_bytes == 20

    def test_disabled_patterns_ignored(self, junk_tree):
        patterns = [JunkPattern(p.pattern, p.description, enabled=False) for p in default_patterns()]
        result = scan_for_junk(junk_tree, patterns)
        assert result.entries == []
        assert result.total_bytes == 0

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(WorkspaceNotFoundError):
            scan_for_junk(tmp_path / "missing", default_patterns())

    def test_file_root_raises(self, junk_tree):
        with pytest.raises(WorkspaceNotFoundError):
            scan_for_junk(junk_tree / "old.bak", default_patterns())

    def test_unreadable_directory_skipped(self, junk_tree, deny_scandir):
        deny_scandir.add(str(junk_tree / "upl"))
        result = scan_for_junk(junk_tree, default_patterns())
        assert {e.path.name for e in result.entries} == {"MAINBDF.MOT", "old.bak"}


class TestJunkScanner:
    def test_background_scan(self, junk_tree):
        seen = []
        with JunkScanner() as scanner:
            future = scanner.submit(junk_tree, default_patterns(), on_done=seen.append)
            result = future.result(timeout=10)

        assert len(result.entries) == 3
        assert seen == [result]

    def test_error_surfaces_through_future(self, tmp_path):
        with JunkScanner() as scanner:
            future = scanner.submit(tmp_path / "missing", default_patterns())
            with pytest.raises(WorkspaceNotFoundError):
                future.result(timeout=10)

    def test_patterns_copied_at_submit(self, junk_tree):
        patterns = [JunkPattern("*.bak")]
        with JunkScanner() as scanner:
            future = scanner.submit(junk_tree, patterns)
            patterns[0].enabled = False
            result = future.result(timeout=10)
        assert [e.path.name for e in result.entries] == ["old.bak"]


class TestDeleteJunk:
    def test_deletes_scanned_files(self, junk_tree):
        scan = scan_for_junk(junk_tree, default_patterns())
        result = delete_junk(scan.entries)

        assert result.files_removed == 3
        assert result.freed_bytes == 60
        assert not result.errors
        assert (junk_tree / "main.utf").exists()
        assert scan_for_junk(junk_tree, default_patterns()).entries == []

    def test_partial_failure(self, junk_tree, monkeypatch):
        scan = scan_for_junk(junk_tree, default_patterns())
        blocked = junk_tree / "old.bak"
        original_unlink = Path.unlink

        def fake_unlink(self, missing_ok=False):
            if self == blocked:
                raise PermissionError(13, "Permission denied", str(self))
            return original_unlink(self, missing_ok=missing_ok)

        monkeypatch.setattr(Path, "unlink", fake_unlink)
        result = delete_junk(scan.entries)

        assert result.files_removed == 2
        assert len(result.errors) == 1
        assert str(blocked) in result.errors[0]
        assert blocked.exists()

    def test_input_collection_untouched(self, junk_tree):
        entries = scan_for_junk(junk_tree, default_patterns()).entries
        before = list(entries)
        delete_junk(entries)
        assert entries == before


class TestPatternPersistence:
    pytestmark = pytest.mark.usefixtures("isolate_settings")

    def test_defaults_when_unset(self):
        assert load_patterns(Settings()) == default_patterns()

    def test_round_trip_through_settings_file(self):
        patterns = [JunkPattern("*.log", "Logs"), JunkPattern("a.txt", "A", enabled=False)]
        save_patterns(Settings(), patterns)
        assert load_patterns(Settings()) == patterns

    def test_malformed_entries_skipped(self):
        settings = Settings()
        settings.set("junk.patterns", [{"pattern": "*.log"}, {"description": "no pattern"}, "junk"])
        assert load_patterns(settings) == [JunkPattern("*.log", "", True)]
