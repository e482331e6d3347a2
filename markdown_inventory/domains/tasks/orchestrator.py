"""
Runs every configured task in order.

A failing task is logged and recorded; the remaining tasks still run.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from markdown_inventory.domains.tasks.runner import TaskRunner
from markdown_inventory.models.schemas import InventoryConfig, RunSummary
from markdown_inventory.utils.config import Settings


def run_all(root_folder: Path, config: InventoryConfig, settings: Optional[Settings] = None) -> RunSummary:
    """
    Run all tasks of ``config`` against ``root_folder``.

    Args:
        root_folder: Project root the task paths are relative to
        config: Loaded inventory configuration
        settings: Settings override (defaults to cached settings)

    Returns:
        Per-task results and failures
    """
    runner = TaskRunner(root_folder, settings)
    summary = RunSummary()

    for number, task in enumerate(config.tasks, start=1):
        try:
            summary.results.append(runner.run(task, number))
        except Exception as e:
            logger.error(f"Error processing task {number} ({task.output_file}): {e}")
            summary.failures.append((number, task, e))

    if summary.ok:
        logger.success("All tasks completed successfully!")
    else:
        logger.warning(f"All tasks completed with {len(summary.failures)} failed task(s)")

    return summary
