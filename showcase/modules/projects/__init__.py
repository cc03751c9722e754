"""
Projects Module
===============

Portfolio projects for the public site and the admin editor.

Provides:
- Public listing with tag / featured / year filters, distinct years, detail
- Multipart create and update with Cloudinary image galleries
- Delete with remote asset and folder cleanup
- Manual reordering within a calendar day
"""

from flask import Blueprint

projects_bp = Blueprint('projects', __name__, url_prefix='/api/projects')

from . import routes

__all__ = ['projects_bp']
