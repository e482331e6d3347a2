"""
File system watcher for the inventory pipeline.

Subscribes to change notifications on every folder referenced by a task and
re-runs all tasks when something changes. Uses watchdog for cross-platform
file system event monitoring.

The watchdog observer thread only enqueues events; the thread calling
``ChangeWatcher.run`` is the single consumer and runs the pipeline to
completion before taking the next event, so runs never overlap.
"""

import os
import queue
import signal
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from markdown_inventory.domains.tasks.orchestrator import run_all
from markdown_inventory.models.schemas import InventoryConfig
from markdown_inventory.utils.config import Settings, get_settings
from markdown_inventory.utils.errors import WatcherError
from markdown_inventory.utils.helpers import normalise_path, unique_in_order


@dataclass(slots=True, frozen=True)
class ChangeEvent:
    """A qualifying file system change."""

    path: str
    kind: str  # created, modified, deleted, moved


class InventoryEventHandler(FileSystemEventHandler):
    """Watchdog handler that queues changes for the pipeline."""

    def __init__(self, events: queue.Queue, ignored_paths: Optional[Set[Path]] = None):
        """
        Initialize event handler.

        Args:
            events: Queue drained by the watcher loop
            ignored_paths: Absolute paths whose events are dropped
                (the task output files)
        """
        super().__init__()
        self.events = events
        self.ignored_paths = ignored_paths or set()

    def should_process(self, path: str) -> bool:
        """
        Check if path should trigger a re-run.

        Args:
            path: File path

        Returns:
            True if should process, False otherwise
        """
        return normalise_path(Path(path)) not in self.ignored_paths

    def _enqueue(self, raw_path, kind: str):
        path = os.fsdecode(raw_path)
        if not self.should_process(path):
            return
        self.events.put(ChangeEvent(path=path, kind=kind))

    def on_created(self, event: FileSystemEvent):
        """Handle file/directory creation."""
        self._enqueue(event.src_path, "created")

    def on_modified(self, event: FileSystemEvent):
        """Handle file modification."""
        # Skip directory modifications (too noisy)
        if event.is_directory:
            return
        self._enqueue(event.src_path, "modified")

    def on_deleted(self, event: FileSystemEvent):
        """Handle file/directory deletion."""
        self._enqueue(event.src_path, "deleted")

    def on_moved(self, event: FileSystemEvent):
        """Handle file/directory move/rename as a change at the destination."""
        self._enqueue(event.dest_path, "moved")


class ChangeWatcher:
    """Re-runs all tasks whenever a watched folder changes."""

    def __init__(self, root_folder: Path, config: InventoryConfig, settings: Optional[Settings] = None):
        """
        Initialize change watcher.

        Args:
            root_folder: Project root the task folders are relative to
            config: Inventory configuration, loaded once and reused
            settings: Settings override (defaults to cached settings)
        """
        self.root_folder = Path(root_folder)
        self.config = config
        self.settings = settings or get_settings()

        self.events: queue.Queue = queue.Queue(maxsize=self.settings.watch_queue_size)
        output_paths = {normalise_path(self.root_folder / task.output_file) for task in config.tasks}
        self.event_handler = InventoryEventHandler(self.events, output_paths)

        self.observer: Optional[Observer] = None
        self._stop_event = threading.Event()

    def watch_paths(self) -> List[Path]:
        """Every distinct folder named by any task, in configured order."""
        return unique_in_order(
            self.root_folder / folder
            for task in self.config.tasks
            for folder in task.folders
        )

    def start(self) -> int:
        """
        Start the observer and subscribe every task folder.

        Returns:
            Number of folders successfully subscribed

        Raises:
            WatcherError: If the observer itself cannot start
        """
        try:
            self.observer = Observer()
            self.observer.daemon = True
            self.observer.start()
        except Exception as e:
            raise WatcherError(f"Failed to start file system observer: {e}") from e

        watched = 0
        for path in self.watch_paths():
            try:
                self.observer.schedule(self.event_handler, str(path), recursive=self.settings.watch_recursive)
                logger.info(f"Started watching: {path}")
                watched += 1
            except Exception as e:
                logger.error(f"Error watching folder {path}: {e}")

        if not watched:
            logger.warning("No folders could be watched; waiting anyway")

        return watched

    def stop(self):
        """Stop watching."""
        if self.observer is None:
            return
        self.observer.stop()
        self.observer.join()
        self.observer = None
        logger.info("File system observer stopped")

    def request_stop(self):
        """Ask :meth:`run` to return after the current iteration."""
        self._stop_event.set()

    def process_next(self, timeout: Optional[float] = None) -> bool:
        """
        Handle one queued event by re-running every task.

        Args:
            timeout: Seconds to wait for an event

        Returns:
            True if an event was processed
        """
        try:
            event = self.events.get(timeout=timeout)
        except queue.Empty:
            return False

        logger.info(f"Modified file: {event.path} - Re-running tasks.")
        try:
            run_all(self.root_folder, self.config, self.settings)
        finally:
            self.events.task_done()
        return True

    def _install_signal_handlers(self):
        if threading.current_thread() is not threading.main_thread():
            return

        def _signal_handler(signum, frame):  # noqa: D401
            logger.info(f"Received signal {signum}, shutting down.")
            self.request_stop()

        signal.signal(signal.SIGINT, _signal_handler)
        signal.signal(signal.SIGTERM, _signal_handler)

    def run(self):
        """Watch until interrupted."""
        self._install_signal_handlers()
        self.start()
        logger.info("Watching for changes. Press Ctrl+C to exit.")

        try:
            while not self._stop_event.is_set():
                self.process_next(timeout=self.settings.watch_poll_interval)
        except KeyboardInterrupt:
            logger.info("Stopping file system watcher...")
        finally:
            self.stop()
