"""
Task runner for the inventory pipeline.

Walks the configured folders of one task, keeps the files that pass the tag
filter and writes the index file: optional template first, then one
formatted line per file in path order.
"""

import os
from pathlib import Path
from typing import Iterator, List, Optional

from loguru import logger

from markdown_inventory.domains.tagging.matcher import matches
from markdown_inventory.models.schemas import DiscoveredFile, Task, TaskResult
from markdown_inventory.utils.config import Settings, get_settings
from markdown_inventory.utils.errors import TaskError
from markdown_inventory.utils.helpers import (
    describe_tags,
    encode_link_path,
    format_mtime,
    relative_to_root,
    strip_extension,
)


class TaskRunner:
    """Runs a single task against a root folder."""

    def __init__(self, root_folder: Path, settings: Optional[Settings] = None):
        """
        Initialize task runner.

        Args:
            root_folder: Directory that task folders, templates and
                output files are relative to
            settings: Settings override (defaults to cached settings)
        """
        self.root_folder = Path(root_folder)
        self.settings = settings or get_settings()

    def _on_walk_error(self, error: OSError):
        logger.warning(f"Cannot access path {error.filename}: {error.strerror or error}. Skipping.")

    def _iter_files(self, folder_path: Path) -> Iterator[str]:
        """Yield every non-directory path below ``folder_path``."""
        if folder_path.is_file():
            yield str(folder_path)
            return

        for current, dirnames, filenames in os.walk(folder_path, onerror=self._on_walk_error):
            dirnames.sort()
            for name in sorted(filenames):
                yield os.path.join(current, name)

    def discover(self, task: Task) -> List[DiscoveredFile]:
        """
        Collect matching files for every folder and extension pair.

        Overlapping folders or extensions are not deduplicated.

        Returns:
            Discovered files sorted by root-relative path
        """
        discovered: List[DiscoveredFile] = []
        root = str(self.root_folder)

        for folder in task.folders:
            folder_path = self.root_folder / folder
            for extension in task.normalized_extensions():
                for path in self._iter_files(folder_path):
                    if not path.endswith(extension):
                        continue
                    if not matches(Path(path), task.tags):
                        continue

                    try:
                        modified = os.stat(path).st_mtime
                    except OSError as e:
                        logger.warning(f"Cannot access path {path}: {e}. Skipping.")
                        continue

                    discovered.append(
                        DiscoveredFile(relative_path=relative_to_root(path, root), modified=modified)
                    )

        discovered.sort(key=lambda item: item.relative_path)
        return discovered

    def render_line(self, task: Task, item: DiscoveredFile) -> str:
        """Format one index line: display name, encoded path, date."""
        display_name = strip_extension(os.path.basename(item.relative_path), task.extensions)
        link_path = encode_link_path(item.relative_path)
        modified = format_mtime(item.modified, self.settings.date_format)
        line_format = task.format or self.settings.default_format

        try:
            return line_format % (display_name, link_path, modified)
        except (TypeError, ValueError) as e:
            raise TaskError(f"invalid format {line_format!r}: {e}") from e

    def _read_template(self, template: str) -> Optional[bytes]:
        template_path = self.root_folder / template
        try:
            content = template_path.read_bytes()
        except OSError as e:
            logger.warning(f"Error reading template {template_path}: {e}")
            return None

        if not content.endswith(b"\n"):
            content += b"\n"
        return content

    def run(self, task: Task, task_number: int = 1) -> TaskResult:
        """
        Discover, render and write one task's index file.

        Args:
            task: Task to run
            task_number: 1-based position used in progress messages

        Returns:
            Written lines and template used

        Raises:
            TaskError: If the output file cannot be created or written
        """
        logger.info(f"Processing task {task_number}: {task.output_file}{describe_tags(task.tags)}")

        discovered = self.discover(task)
        lines = [self.render_line(task, item) for item in discovered]

        output_path = self.root_folder / task.output_file
        try:
            with open(output_path, "wb") as output:
                if task.template:
                    template_content = self._read_template(task.template)
                    if template_content is not None:
                        output.write(template_content)
                for line in lines:
                    output.write(line.encode("utf-8", "surrogateescape"))
        except OSError as e:
            raise TaskError(f"error writing output file {output_path}: {e}") from e

        template_msg = f" (using template: {task.template})" if task.template else ""
        logger.success(f"Created {task.output_file} with {len(lines)} files{template_msg}")

        return TaskResult(output_file=task.output_file, lines=lines, template=task.template)


def run_task(
    task: Task,
    root_folder: Path,
    task_number: int = 1,
    settings: Optional[Settings] = None,
) -> TaskResult:
    """Run one task; see :meth:`TaskRunner.run`."""
    return TaskRunner(root_folder, settings).run(task, task_number)
