"""
Inventory domains

- tagging: front matter tag extraction and tag filtering
- tasks: per-task file discovery and index rendering, plus the batch runner
- change_watch: re-running tasks on file system events
"""

__all__ = ["tagging", "tasks", "change_watch"]
