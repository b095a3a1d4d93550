"""constgraph - interactive dependency graph viewer for code constants.

Fetches constants and their dependencies from an analysis backend and lays
them out with a force-directed simulation that supports hover highlighting,
drag-to-pin, click-to-focus and zoom/pan.
"""

__version__ = "0.1.0"
