"""
Tag filtering for discovered files.

A file matches when any required tag is declared in its front matter or
appears inline as a ``#tag`` marker anywhere in its text.
"""

from pathlib import Path
from typing import Sequence

from loguru import logger

from markdown_inventory.domains.tagging.extractor import extract_tags


def content_matches(content: str, required_tags: Sequence[str]) -> bool:
    """
    Check raw file text against the required tags.

    Args:
        content: Full file text
        required_tags: Tags from the task; a leading ``#`` is optional

    Returns:
        True if any one required tag is found
    """
    if not required_tags:
        return True

    declared = extract_tags(content)
    for required in required_tags:
        if required.removeprefix("#") in declared:
            return True

    for required in required_tags:
        marker = required if required.startswith("#") else "#" + required
        if marker in content:
            return True

    return False


def matches(file_path: Path, required_tags: Sequence[str]) -> bool:
    """Check a file on disk; unreadable files never match."""
    if not required_tags:
        return True

    try:
        content = Path(file_path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"Cannot read {file_path} for tag matching: {e}")
        return False

    return content_matches(content, required_tags)
