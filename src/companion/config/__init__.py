"""
Companion Configuration Module

Provides centralized configuration management with:
- Environment-based settings loading
- Validation of tuning values
- Locations of externally editable reference data
"""

from companion.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
