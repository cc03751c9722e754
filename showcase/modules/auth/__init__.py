"""
Showcase Auth Module

Provides admin authentication:
- Google OAuth sign-in (Authlib)
- Persisted session tokens with expiry
- Admin allowlist synced to users.is_admin on every sign-in
- verify_admin / admin_required guard for mutating endpoints
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')

from . import routes
from .database import AuthDatabase
from .guards import admin_required, verify_admin
from .utils import configure_oauth, oauth

__all__ = ['auth_bp', 'AuthDatabase', 'admin_required', 'verify_admin', 'configure_oauth', 'oauth']
