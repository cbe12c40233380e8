"""
Configuration domain models.
"""

from clinreview.domain.config.settings import AppConfig, ReviewDbSettings

__all__ = ["AppConfig", "ReviewDbSettings"]
