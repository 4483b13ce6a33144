"""
lighthouseupdater - Rebuild containers when their base images change
"""

__version__ = "0.3.0"

from .core import LighthouseUpdater, UpdaterError

__all__ = ["LighthouseUpdater", "UpdaterError"]
