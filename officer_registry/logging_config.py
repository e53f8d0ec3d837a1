"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this module
only decides where those records go.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    root = logging.getLogger()
    if not any(getattr(h, "_officer_registry", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._officer_registry = True
        root.addHandler(handler)
    root.setLevel(level)
