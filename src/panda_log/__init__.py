"""
panda-log: a tabbed desktop log viewer for PyQt6.

Opens plain-text files, tails them as they grow, classifies each line as
error/warning/info/other, and filters lines live as you type.

Architecture:
- Core: line classification, snapshot reads and TailWatcher (file tailing)
- Protocols: process-wide configuration
- Services: LogSession (per-file state) and SessionRegistry (open tabs)
- Theming / Widgets / Windows: the PyQt6 presentation layer
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
