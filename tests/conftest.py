import os
import sys
from datetime import datetime
from pathlib import Path

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def reset_loguru():
    """Drop sinks added by the CLI so later tests never write to closed streams."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def log_messages():
    """Collect ``LEVEL: message`` strings emitted through loguru."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(f"{message.record['level'].name}: {message.record['message']}"),
        level="DEBUG",
    )
    yield messages
    try:
        logger.remove(handler_id)
    except ValueError:
        pass


NOON_2024_03_05 = datetime(2024, 3, 5, 12, 0).timestamp()


@pytest.fixture
def write_file():
    """Create a file (and parents) with a fixed modification time."""

    def _write(path: Path, text: str = "", mtime: float = NOON_2024_03_05) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        os.utime(path, (mtime, mtime))
        return path

    return _write
