"""
Source discovery: turn the paths given on the command line into the list of
JavaScript files to lint.

Directories are searched recursively for .js/.jsx/.mjs/.cjs files. Dependency
folders, bundler output, VCS metadata and caches are pruned by name.

Typical usage:
    from pathlib import Path
    from lintkit.traversal import find_source_files, collect_targets

    js_files = find_source_files(Path("./my_project"))

    # Mixed file and directory arguments, as the CLI receives them
    files = collect_targets([Path("src"), Path("index.js")])
"""

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Optional, Set

from lintkit.config import DEFAULT_EXTENSIONS

logger = logging.getLogger(__name__)

# Directory names never descended into
DEFAULT_IGNORE_DIRS: Set[str] = {
    # package managers
    "node_modules",
    "bower_components",
    "jspm_packages",
    "vendor",
    # bundler and test output
    "build",
    "dist",
    "out",
    "coverage",
    ".next",
    # VCS
    ".git",
    ".hg",
    ".svn",
    # editors
    ".idea",
    ".vscode",
    # caches
    ".cache",
    ".parcel-cache",
    "__pycache__",
}


def is_js_file(path: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> bool:
    """
    Check if a file has a JavaScript extension.

    Examples:
        >>> is_js_file(Path("main.js"))
        True
        >>> is_js_file(Path("App.JSX"))
        True
        >>> is_js_file(Path("main.ts"))
        False
    """
    return path.suffix.lower() in extensions


def should_ignore_directory(directory: Path, ignore_dirs: Set[str]) -> bool:
    """
    True if directory's own name (not its full path) is in ignore_dirs.
    The comparison is case-sensitive.

    Examples:
        >>> should_ignore_directory(Path("node_modules"), {"node_modules"})
        True
        >>> should_ignore_directory(Path("src"), {"node_modules"})
        False
    """
    return directory.name in ignore_dirs


def _scan(directory: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            return list(it)
    except OSError as e:
        # unreadable subdirectories are skipped, the rest of the tree is still searched
        logger.warning("Cannot list %s: %s", directory, e)
        return []


def find_source_files(
    root: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    ignore_dirs: Optional[Set[str]] = None,
    follow_symlinks: bool = False,
    filter_fn: Optional[Callable[[Path], bool]] = None,
) -> list[Path]:
    """
    Recursively collect source files under root.

    Args:
        root: Directory to search.
        extensions: Suffixes to collect, lower-case with the leading dot.
        ignore_dirs: Directory names to prune; DEFAULT_IGNORE_DIRS when None.
        follow_symlinks: Descend into and collect symlinked entries. Off by
                         default so a link cycle cannot loop forever.
        filter_fn: Extra predicate; a file is kept only if it returns True.

    Returns:
        Absolute paths, sorted.

    Raises:
        FileNotFoundError: root does not exist.
        NotADirectoryError: root exists but is a file.
    """
    ignore = DEFAULT_IGNORE_DIRS if ignore_dirs is None else ignore_dirs
    suffixes = frozenset(e.lower() for e in extensions)

    root = root.resolve()
    if not root.exists():
        logger.error("No such directory: %s", root)
        raise FileNotFoundError(f"No such directory: {root}")
    if not root.is_dir():
        logger.error("Not a directory: %s", root)
        raise NotADirectoryError(f"Not a directory: {root}")

    logger.info("Searching %s for %s files", root, ", ".join(sorted(suffixes)))

    found: list[Path] = []
    pending = [root]
    while pending:
        directory = pending.pop()
        for entry in _scan(directory):
            path = Path(entry.path)
            if entry.is_symlink() and not follow_symlinks:
                logger.debug("Symlink not followed: %s", path)
            elif entry.is_dir(follow_symlinks=follow_symlinks):
                if should_ignore_directory(path, ignore):
                    logger.debug("Pruned: %s", path)
                else:
                    pending.append(path)
            elif entry.is_file(follow_symlinks=follow_symlinks) and is_js_file(path, suffixes):
                if filter_fn is None or filter_fn(path):
                    found.append(path)

    found.sort()
    logger.info("Found %d file(s) under %s", len(found), root)
    return found


def collect_targets(
    targets: Iterable[Path],
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    ignore_dirs: Optional[Set[str]] = None,
) -> list[Path]:
    """
    Resolve a mix of files and directories into a de-duplicated file list.

    Explicit files are always kept, whatever their extension; directories are
    expanded with find_source_files(). First occurrence wins the position.
    """
    seen: set[Path] = set()
    files: list[Path] = []
    for target in targets:
        if target.is_dir():
            found = find_source_files(target, extensions=extensions, ignore_dirs=ignore_dirs)
            if not found:
                logger.warning("No source files found under %s", target)
        else:
            found = [target.resolve()]
        for path in found:
            if path not in seen:
                seen.add(path)
                files.append(path)
    return files
