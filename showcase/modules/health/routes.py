"""
Health Routes
=============

Database reachability plus disk usage, for uptime monitors.
"""

import shutil
from datetime import datetime

from flask import jsonify

from . import health_bp
from ...core.database import Database

DISK_WARNING_PERCENT = 90


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------

def _get_disk_usage():
    """Get disk usage for root partition."""
    try:
        usage = shutil.disk_usage('/')
        return {
            'total_gb': round(usage.total / (1024 ** 3), 1),
            'free_gb': round(usage.free / (1024 ** 3), 1),
            'percent': round((usage.used / usage.total) * 100, 1),
        }
    except Exception as e:
        return {'total_gb': 0, 'free_gb': 0, 'percent': 0, 'error': str(e)}


def _compute_status(database_ok, disk):
    """Database down is critical; a nearly full disk is a warning."""
    issues = []
    if not database_ok:
        issues.append('database unreachable')
        return 'critical', issues
    if disk.get('percent', 0) >= DISK_WARNING_PERCENT:
        issues.append(f"disk {disk['percent']}% used")
        return 'warning', issues
    return 'ok', issues


def _build_health_response():
    database_ok = Database.ping()
    disk = _get_disk_usage()
    status, issues = _compute_status(database_ok, disk)

    return {
        'status': status,
        'timestamp': datetime.now().isoformat(),
        'checks': {
            'database': 'ok' if database_ok else 'unreachable',
            'disk': disk,
        },
        'issues': issues,
    }, status


# ---------------------------------------------------------------------------
# Public routes (no auth)
# ---------------------------------------------------------------------------

@health_bp.route('/')
@health_bp.route('')
def health_check():
    """Public health endpoint for uptime monitors."""
    data, status = _build_health_response()
    code = 503 if status == 'critical' else 200
    return jsonify(data), code
