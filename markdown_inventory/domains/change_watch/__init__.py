"""
Change Watch Domain

Keeps index files current by re-running every task when a watched folder
reports a create, write, remove or rename.
"""

__all__ = ["watchers"]
