"""Tests for deps_analyzer module."""
import pytest

from sleek.deps_analyzer import DependencyAnalyzer, declared_dependencies

MANIFEST = """\
[package]
name = "demo"
version = "0.1.0"

[dependencies]
foo = "1.0"
bar = "2.0"

[dev-dependencies]
baz = "3.0"
"""


class TestDeclaredDependencies:
    """Tests for manifest scanning."""

    def test_only_dependencies_section(self):
        """Names outside [dependencies] are ignored."""
        assert declared_dependencies(MANIFEST) == ["foo", "bar"]

    def test_manifest_line_order(self):
        manifest = "[dependencies]\nzeta = \"1\"\nalpha = \"1\"\nmid = \"1\"\n"
        assert declared_dependencies(manifest) == ["zeta", "alpha", "mid"]

    def test_inline_table_split_on_first_equals(self):
        """Only the first '=' separates the name."""
        manifest = '[dependencies]\nserde = { version = "1.0", features = ["derive"] }\n'
        assert declared_dependencies(manifest) == ["serde"]

    def test_section_reentered(self):
        """A later [dependencies] header turns tracking back on."""
        manifest = (
            "[dependencies]\na = \"1\"\n"
            "[features]\ndefault = []\n"
            "[dependencies]\nb = \"1\"\n"
        )
        assert declared_dependencies(manifest) == ["a", "b"]

    def test_skips_blank_comment_and_bare_lines(self):
        manifest = "[dependencies]\n\n# old = \"0.1\"\nnot a pair\n  clap = \"4\"  \n"
        assert declared_dependencies(manifest) == ["clap"]

    def test_target_specific_section_excluded(self):
        """Only the exact [dependencies] header counts."""
        manifest = "[target.'cfg(unix)'.dependencies]\nlibc = \"0.2\"\n"
        assert declared_dependencies(manifest) == []

    def test_empty_manifest(self):
        assert declared_dependencies("") == []

    def test_commented_header_ends_section(self):
        """A header with a trailing comment still closes [dependencies]."""
        manifest = '[dependencies]\nfoo = "1"\n[dev-dependencies] # test only\nbaz = "3"\n'
        assert declared_dependencies(manifest) == ["foo"]

    def test_commented_dependencies_header_opens_section(self):
        """[dependencies] followed by a comment is still the section header."""
        manifest = '[dependencies] # runtime\nbar = "2"\n'
        assert declared_dependencies(manifest) == ["bar"]


class TestCheck:
    """Tests for the unused dependency heuristic."""

    def test_reports_missing_from_lock(self):
        """Lock text containing only foo reports exactly bar."""
        analyzer = DependencyAnalyzer()
        assert analyzer.check(MANIFEST, 'name = "foo"\n') == ["bar"]

    def test_all_present(self):
        lock = '[[package]]\nname = "foo"\n\n[[package]]\nname = "bar"\n'
        assert DependencyAnalyzer().check(MANIFEST, lock) == []

    def test_empty_lock_reports_all(self):
        assert DependencyAnalyzer().check(MANIFEST, "") == ["foo", "bar"]

    def test_substring_false_negative_preserved(self):
        """A name contained in another locked name counts as present."""
        manifest = "[dependencies]\nserde = \"1\"\n"
        lock = 'name = "serde_json"\n'
        assert DependencyAnalyzer().check(manifest, lock) == []

    def test_dev_dependency_after_commented_header_not_reported(self):
        """Entries under '[dev-dependencies] # ...' are not checked."""
        manifest = '[dependencies]\nfoo = "1"\n[dev-dependencies] # test only\nbaz = "3"\n'
        assert DependencyAnalyzer().check(manifest, '"foo"') == []

    def test_commented_dependencies_header_checked(self):
        """Entries under '[dependencies] # ...' are checked."""
        manifest = '[dependencies] # runtime\nbar = "2"\n'
        assert DependencyAnalyzer().check(manifest, '"foo"') == ["bar"]


class TestCheckFiles:
    """Tests for reading manifest and lock from disk."""

    def test_reads_files(self, tmp_path):
        manifest = tmp_path / "Cargo.toml"
        lock = tmp_path / "Cargo.lock"
        manifest.write_text(MANIFEST)
        lock.write_text('name = "bar"\n')
        assert DependencyAnalyzer().check_files(manifest, lock) == ["foo"]

    def test_missing_lock_raises(self, tmp_path):
        manifest = tmp_path / "Cargo.toml"
        manifest.write_text(MANIFEST)
        with pytest.raises(FileNotFoundError):
            DependencyAnalyzer().check_files(manifest, tmp_path / "Cargo.lock")
