"""
Data models for Markdown File Inventory.

Pydantic models describe the YAML task configuration; the transient records
produced while a task runs are plain dataclasses.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from markdown_inventory.utils.helpers import normalise_extension


# =====================================================
# Configuration Models
# =====================================================

class Task(BaseModel):
    """One configured unit producing one output index file."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    output_file: str
    template: Optional[str] = None
    folders: List[str]
    extensions: List[str]
    tags: List[str] = Field(default_factory=list)
    format: Optional[str] = None  # printf-style, three %s: name, path, date

    @field_validator("tags", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return [] if value is None else value

    def normalized_extensions(self) -> List[str]:
        """Extensions with a guaranteed leading dot, in configured order."""
        return [normalise_extension(ext) for ext in self.extensions]


class InventoryConfig(BaseModel):
    """Ordered task list from ``.markdown-file-inventory.yaml``."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    tasks: List[Task] = Field(default_factory=list)

    @field_validator("tasks", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return [] if value is None else value


# =====================================================
# Run Records
# =====================================================

@dataclass(slots=True)
class DiscoveredFile:
    """A file selected by a task walk."""

    relative_path: str
    modified: float


@dataclass(slots=True)
class TaskResult:
    """Outcome of a successful task run."""

    output_file: str
    lines: List[str] = field(default_factory=list)
    template: Optional[str] = None

    @property
    def file_count(self) -> int:
        return len(self.lines)


@dataclass(slots=True)
class RunSummary:
    """Outcome of one pass over all configured tasks."""

    results: List[TaskResult] = field(default_factory=list)
    failures: List[Tuple[int, Task, Exception]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
