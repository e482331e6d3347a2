"""
Helper utilities for Markdown File Inventory.

Small path and formatting functions shared by the task runner and watcher.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional


def normalise_extension(extension: str) -> str:
    """Return ``extension`` with a leading dot."""
    if extension.startswith('.'):
        return extension
    return '.' + extension


def strip_extension(file_name: str, extensions: Iterable[str]) -> str:
    """
    Strip the first matching extension from a file name.

    Args:
        file_name: Base name of the file
        extensions: Candidate extensions, with or without leading dot

    Returns:
        Display name, or ``file_name`` unchanged when nothing matches
    """
    for extension in extensions:
        extension = normalise_extension(extension)
        if file_name.endswith(extension):
            return file_name[:-len(extension)]
    return file_name


def encode_link_path(relative_path: str) -> str:
    """Forward slashes and ``%20`` for spaces, as markdown links expect."""
    return relative_path.replace('\\', '/').replace(' ', '%20')


def format_mtime(timestamp: float, date_format: str = "%Y-%m-%d") -> str:
    """Format a POSIX timestamp in local time."""
    return datetime.fromtimestamp(timestamp).strftime(date_format)


def normalise_path(path: Path) -> Path:
    """Return a resolved version of ``path`` without forcing existence."""
    try:
        return Path(path).expanduser().resolve()
    except (FileNotFoundError, RuntimeError):
        return Path(path).expanduser().absolute()


def relative_to_root(path: str, root: str) -> str:
    """Path of ``path`` relative to ``root``, falling back to ``path``."""
    try:
        return os.path.relpath(path, root)
    except ValueError:
        # Different drives on Windows
        return path


def unique_in_order(items: Iterable[Path]) -> list[Path]:
    """Drop repeated paths while keeping first-seen order."""
    seen: set[Path] = set()
    result: list[Path] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result


def describe_tags(tags: Optional[list[str]]) -> str:
    """Suffix used in progress messages for tag-filtered tasks."""
    if not tags:
        return ""
    return f" (filtering by tags: {', '.join(tags)})"
