"""
Showcase Core
=============

Core utilities and shared functionality for Showcase modules.
"""

from .config import Config, get_config_value
from .database import Database, db
from .logging_service import LoggingService

__all__ = ['Config', 'get_config_value', 'Database', 'db', 'LoggingService']
