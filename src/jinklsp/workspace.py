"""
Discovery and initial indexing of the Jink source files of a workspace.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from overrides import override

from jinklsp.jink_index import SymbolIndex
from jinklsp.jink_language import FILE_EXTENSION

log = logging.getLogger(__name__)

JINK_FILE_ENCODING = "utf-8"


class SourceTreeScanner:
    """Recursively collects source files with a given extension, skipping build and VCS directories."""

    IGNORED_DIRNAMES = frozenset({".git", "node_modules", "dist", "out", "build", "target"})

    def __init__(self, extension: str = FILE_EXTENSION) -> None:
        self.extension = extension

    def is_ignored_dirname(self, dirname: str) -> bool:
        """Check if directory should be ignored during file scanning."""
        return dirname in self.IGNORED_DIRNAMES

    def find_source_files(self, root: str) -> list[str]:
        """
        Recursively collect all source files below a folder.

        :return: absolute paths in walk order; an unreadable subtree contributes nothing
        """
        source_files: list[str] = []

        def on_error(error: OSError) -> None:
            log.debug(f"Skipping unreadable path {error.filename}: {error}")

        for dirpath, dirs, files in os.walk(root, onerror=on_error):
            dirs[:] = sorted(d for d in dirs if not self.is_ignored_dirname(d))
            for file in sorted(files):
                if file.endswith(self.extension):
                    source_files.append(os.path.join(dirpath, file))
        return source_files


class JinkSourceScanner(SourceTreeScanner):
    """Scanner for Jink workspaces, honoring user-configured ignored directories."""

    def __init__(self, extra_ignored_dirnames: Iterable[str] = ()) -> None:
        super().__init__(FILE_EXTENSION)
        self._extra_ignored_dirnames = frozenset(extra_ignored_dirnames)

    @override
    def is_ignored_dirname(self, dirname: str) -> bool:
        return super().is_ignored_dirname(dirname) or dirname in self._extra_ignored_dirnames


def read_source_file(path: str) -> str | None:
    """Read a source file, returning None if it cannot be read."""
    try:
        with open(path, encoding=JINK_FILE_ENCODING, errors="ignore") as f:
            return f.read()
    except OSError as e:
        log.debug(f"Failed to read {path}: {e}")
        return None


def scan_workspace(folders: Iterable[str], index: SymbolIndex, scanner: SourceTreeScanner | None = None) -> list[str]:
    """
    Index every source file of the given workspace folders, sequentially.

    :param folders: file system paths of the workspace folders
    :param index: index to populate; documents are keyed by file URI
    :param scanner: file discovery strategy, JinkSourceScanner by default
    :return: URIs of the indexed documents
    """
    scanner = scanner or JinkSourceScanner()
    indexed: list[str] = []
    for folder in folders:
        files = scanner.find_source_files(folder)
        log.info(f"Found {len(files)} Jink files in {folder}")
        for path in files:
            source = read_source_file(path)
            if source is None:
                continue
            uri = Path(path).resolve().as_uri()
            index.update(uri, source)
            indexed.append(uri)
    log.info(f"Indexed {len(indexed)} Jink files: {index.get_stats()}")
    return indexed
