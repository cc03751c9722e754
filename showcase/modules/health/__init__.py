"""
Health Module
=============

Public /health endpoint for uptime monitors (no auth).

Usage:
    from showcase.modules.health import health_bp

    app.register_blueprint(health_bp)  # Registers at /health
"""

from flask import Blueprint

health_bp = Blueprint(
    'health',
    __name__,
    url_prefix='/health'
)

from . import routes
