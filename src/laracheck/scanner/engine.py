"""Project scanner — walks a project tree and yields classified files."""

from __future__ import annotations

import fnmatch
import logging
import os
import time
from collections.abc import Iterator
from pathlib import Path

from laracheck.errors import ProjectRootError, ScanLimitError
from laracheck.scanner.classify import classify
from laracheck.scanner.models import ProjectFile, ScanWarning

logger = logging.getLogger(__name__)

# Directories to always skip
_SKIP_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    ".vscode",
    ".fleet",
    "node_modules",
    "vendor",
    "storage",
}

# Generated output, matched against the path relative to the root
_SKIP_RELATIVE_DIRS = {
    "bootstrap/cache",
    "public/build",
    "public/vendor",
}

_SCAN_EXTENSIONS = {
    ".php",
    ".vue",
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".html",
}

# Max file size to scan (1 MB)
_MAX_FILE_SIZE = 1_048_576


class ScanPass:
    """Lazy, finite, restartable sequence of the files under one root.

    Every iteration walks the tree again and re-reads each file from disk.
    ``warnings`` and ``files_scanned`` describe the most recent iteration.
    """

    def __init__(self, root: Path, scanner: ProjectScanner) -> None:
        self.root = root
        self._scanner = scanner
        self.warnings: list[ScanWarning] = []
        self.files_scanned = 0

    def __iter__(self) -> Iterator[ProjectFile]:
        self.warnings = []
        self.files_scanned = 0
        for path in self._scanner.iter_paths(self.root, self.warnings):
            self._scanner.check_limits(self.files_scanned)
            rel = path.relative_to(self.root).as_posix()
            try:
                content = path.read_text(encoding="utf-8", errors="ignore")
            except OSError as e:
                logger.debug("Skipping %s: %s", path, e)
                self.warnings.append(ScanWarning(path=rel, reason=_reason(e)))
                continue

            self.files_scanned += 1
            yield ProjectFile(
                path=str(path),
                relative_path=rel,
                role=classify(rel),
                content=content,
            )


class ProjectScanner:
    """Finds the Laravel / Vue sources of a project."""

    def __init__(
        self,
        exclude_patterns: list[str] | None = None,
        max_file_size: int = _MAX_FILE_SIZE,
        max_files: int | None = None,
        deadline: float | None = None,
    ) -> None:
        self._exclude = list(exclude_patterns or [])
        self._max_file_size = max_file_size
        self._max_files = max_files
        self._deadline = deadline

    def scan(self, root: str | Path) -> ScanPass:
        """Validate *root* and return a lazy scan over it.

        Raises ProjectRootError when the root is missing or unreadable.
        """
        root = Path(root).resolve()
        _check_root(root)
        return ScanPass(root, self)

    def iter_paths(self, root: Path, warnings: list[ScanWarning]) -> Iterator[Path]:
        """Walk directory yielding scannable files."""

        def _on_error(error: OSError) -> None:
            rel = _relative(error.filename, root)
            logger.debug("Cannot list %s: %s", rel, error)
            warnings.append(ScanWarning(path=rel, reason=_reason(error)))

        for current, dirs, files in os.walk(root, onerror=_on_error):
            base = Path(current)
            # Prune skipped directories in-place; sorted for a stable walk order
            dirs[:] = sorted(
                d
                for d in dirs
                if d not in _SKIP_DIRS
                and (base / d).relative_to(root).as_posix() not in _SKIP_RELATIVE_DIRS
                and not self._excluded(d, (base / d).relative_to(root).as_posix())
            )

            for name in sorted(files):
                path = base / name
                if path.suffix.lower() not in _SCAN_EXTENSIONS:
                    continue
                rel = path.relative_to(root).as_posix()
                if self._excluded(name, rel):
                    continue
                try:
                    size = path.stat().st_size
                except OSError as e:
                    warnings.append(ScanWarning(path=rel, reason=_reason(e)))
                    continue
                if size > self._max_file_size:
                    logger.debug("Skipping %s: %d bytes", rel, size)
                    warnings.append(
                        ScanWarning(
                            path=rel,
                            reason=f"larger than {self._max_file_size} bytes",
                        )
                    )
                    continue
                yield path

    def _excluded(self, name: str, rel: str) -> bool:
        return any(
            name == pattern or fnmatch.fnmatch(rel, pattern)
            for pattern in self._exclude
        )

    def check_limits(self, files_seen: int) -> None:
        if self._max_files is not None and files_seen >= self._max_files:
            raise ScanLimitError(
                f"Scan aborted: more than {self._max_files} files to check"
            )
        if self._deadline is not None and time.monotonic() > self._deadline:
            raise ScanLimitError("Scan aborted: time limit exceeded")


def _check_root(root: Path) -> None:
    if not root.exists():
        raise ProjectRootError(f"Project root does not exist: {root}")
    if not root.is_dir():
        raise ProjectRootError(f"Project root is not a directory: {root}")
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise ProjectRootError(f"Project root is not readable: {root} ({_reason(e)})") from e


def _relative(filename: str | None, root: Path) -> str:
    if not filename:
        return "."
    try:
        return Path(filename).relative_to(root).as_posix()
    except ValueError:
        return filename


def _reason(error: OSError) -> str:
    return error.strerror or type(error).__name__
