"""
Configuration infrastructure.
"""

from clinreview.infrastructure.config.repository import ConfigRepository

__all__ = ["ConfigRepository"]
