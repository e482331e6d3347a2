"""Exception types raised across Markdown File Inventory."""


class InventoryError(Exception):
    """Base class for all inventory errors."""


class ConfigError(InventoryError):
    """Config file missing, unreadable or invalid. Fatal at startup."""


class TaskError(InventoryError):
    """A single task could not produce its output file."""


class WatcherError(InventoryError):
    """The file-change notification subsystem could not start."""
