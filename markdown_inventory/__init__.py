"""
Markdown File Inventory

Scans a project tree for files matching configured folders, extensions and
tags, and writes markdown index files linking to them.
"""

__version__ = "1.0.0"
