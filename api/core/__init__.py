"""Core plumbing for the video redirect service: settings, logging and the
legacy URL middleware.

``configure_logging`` is re-exported so the entrypoint can set up logging
before anything else is imported:
    from core import configure_logging
"""

from core.logger import configure_logging

__all__ = [
    "configure_logging",
]
