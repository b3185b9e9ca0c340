"""Mini README: Core package initializer for the film budget desk.

This module exposes convenience imports so that the CLI, the web interface
and tests can reach the logging helpers without knowing the module layout.
Heavier collaborators (database, web framework) are imported lazily by the
subpackages that need them.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
