from flask import g, jsonify, request

from . import site_settings_bp
from .database import get_settings_db, parse_keys, upsert_setting_db
from ..auth.guards import admin_required
from ...core.database import db
from ...core.logging_service import LoggingService


@site_settings_bp.route('', methods=['GET'])
def get_site_settings():
    """Settings for ?keys=a,b (About page keys by default); missing keys are null"""
    keys = parse_keys(request.args.get('keys'))
    if not keys:
        return jsonify({})

    try:
        return jsonify(get_settings_db(keys))
    except Exception as e:
        print(f"Error getting site settings: {e}")
        LoggingService.log_error_with_traceback('site_settings', e, {'keys': keys})
        return jsonify({'error': 'Failed to fetch site settings'}), 500


@site_settings_bp.route('', methods=['PATCH'])
@admin_required
def update_site_setting():
    """Upsert one setting from {key, value}"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON body'}), 400

    key = data.get('key')
    if not isinstance(key, str) or not key.strip():
        return jsonify({'error': 'Missing or invalid key'}), 400
    key = key.strip()

    value = data.get('value')
    if not isinstance(value, str):
        value = ''

    try:
        upsert_setting_db(key, value)
        LoggingService.log_user_action('site_settings', 'update_setting',
                                       user_id=g.admin_user.id, details={'key': key})
        return jsonify({'success': True})
    except Exception as e:
        db.session.rollback()
        print(f"Error updating site setting: {e}")
        LoggingService.log_error_with_traceback('site_settings', e, {'key': key})
        return jsonify({'error': 'Failed to update site setting'}), 500
