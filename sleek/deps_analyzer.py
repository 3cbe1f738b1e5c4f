"""
Unused dependency heuristic.

Reads the names declared under [dependencies] in a Cargo manifest and
reports the ones that do not appear anywhere in the lock file text.

This is a textual presence check, not an analysis of source code:
- a name that is a substring of another name (or of any other text in
  the lock file) is never reported, even when it is unused
- a name present in the lock file counts as used even if no code uses it
"""
from pathlib import Path

from sleek.config import Deps
from sleek.sleek_utils import log_event

COMPONENT = "deps_analyzer"


def _section_header(line: str) -> str | None:
    """Return the header if line is a [section] header, ignoring a trailing comment."""
    header = line.split(Deps.COMMENT_PREFIX, 1)[0].strip()
    if header.startswith("[") and header.endswith("]"):
        return header
    return None


def declared_dependencies(manifest_text: str, section: str = Deps.SECTION_HEADER) -> list[str]:
    """Dependency names declared in section, in manifest line order."""
    names = []
    in_section = False

    for raw in manifest_text.splitlines():
        line = raw.strip()
        header = _section_header(line)
        if header is not None:
            in_section = header == section
            continue
        if not in_section or not line or line.startswith(Deps.COMMENT_PREFIX):
            continue
        if "=" not in line:
            continue

        name = line.split("=", 1)[0].strip()
        if name:
            names.append(name)

    return names


class DependencyAnalyzer:
    """Find declared dependencies that are absent from the lock text."""

    def __init__(self, section: str = Deps.SECTION_HEADER):
        self.section = section

    def check(self, manifest_text: str, lock_text: str) -> list[str]:
        """Return declared names that never occur in lock_text."""
        declared = declared_dependencies(manifest_text, self.section)
        unused = [name for name in declared if name not in lock_text]
        log_event(COMPONENT, "checked", {"declared": len(declared), "unused": unused})
        return unused

    def check_files(self, manifest_path: Path, lock_path: Path) -> list[str]:
        """Read both files and run check().

        Raises:
            FileNotFoundError: if either file is missing
        """
        manifest_text = Path(manifest_path).read_text(encoding="utf-8", errors="replace")
        lock_text = Path(lock_path).read_text(encoding="utf-8", errors="replace")
        return self.check(manifest_text, lock_text)
