"""
Configuration for PraxPDF: persisted settings and logging.
"""

from .settings import AppSettings, get_default_settings_path, invalidate_settings_cache
from .logging_setup import setup_logging

__all__ = ['AppSettings', 'get_default_settings_path', 'invalidate_settings_cache', 'setup_logging']
