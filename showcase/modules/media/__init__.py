"""
Media Module
============

Admin-only Cloudinary helpers for the editor:
- Signed parameters for direct browser uploads
- Deleting a single asset with an in-use check
- Cleaning up orphaned direct uploads
"""

from flask import Blueprint

media_bp = Blueprint('media', __name__, url_prefix='/api')

from . import routes

__all__ = ['media_bp']
