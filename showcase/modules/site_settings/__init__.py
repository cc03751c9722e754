"""
Site Settings Module
====================

Flat key/value store for editable page copy (About page hero, story, services).
"""

from flask import Blueprint

site_settings_bp = Blueprint('site_settings', __name__, url_prefix='/api/site-settings')

from . import routes
from .database import ABOUT_KEYS

__all__ = ['site_settings_bp', 'ABOUT_KEYS']
