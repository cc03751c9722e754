from flask import jsonify, request
from sqlalchemy.exc import IntegrityError

from . import tags_bp
from .database import (create_tag_db, delete_tag_db, get_all_tags_db,
                       get_tag_by_name_db, rename_tag_db)
from ..auth.guards import admin_required
from ...core.database import db
from ...core.logging_service import LoggingService
from ...core.models import Tag

DUPLICATE_TAG_ERROR = 'A tag with that name already exists'


def _get_name():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        return None
    return name.strip()


@tags_bp.route('', methods=['GET'])
def get_tags():
    """List tags with project counts"""
    try:
        return jsonify(get_all_tags_db())
    except Exception as e:
        print(f"Error getting tags: {e}")
        LoggingService.log_error_with_traceback('tags', e)
        return jsonify({'error': 'Failed to fetch tags'}), 500


@tags_bp.route('', methods=['POST'])
@admin_required
def create_tag():
    """Create a tag"""
    name = _get_name()
    if not name:
        return jsonify({'error': 'Name is required'}), 400

    try:
        if get_tag_by_name_db(name):
            return jsonify({'error': DUPLICATE_TAG_ERROR}), 409
        tag = create_tag_db(name)
        return jsonify(tag.to_dict()), 201
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': DUPLICATE_TAG_ERROR}), 409
    except Exception as e:
        db.session.rollback()
        print(f"Error creating tag: {e}")
        LoggingService.log_error_with_traceback('tags', e)
        return jsonify({'error': 'Failed to create tag'}), 500


@tags_bp.route('/<tag_id>', methods=['PATCH'])
@admin_required
def update_tag(tag_id):
    """Rename a tag"""
    name = _get_name()
    if not name:
        return jsonify({'error': 'Name is required'}), 400

    try:
        tag = db.session.get(Tag, tag_id)
        if tag is None:
            return jsonify({'error': 'Tag not found'}), 404
        if get_tag_by_name_db(name, exclude_id=tag.id):
            return jsonify({'error': DUPLICATE_TAG_ERROR}), 409
        tag = rename_tag_db(tag, name)
        return jsonify(tag.to_dict())
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': DUPLICATE_TAG_ERROR}), 409
    except Exception as e:
        db.session.rollback()
        print(f"Error updating tag: {e}")
        LoggingService.log_error_with_traceback('tags', e, {'tag_id': tag_id})
        return jsonify({'error': 'Failed to update tag'}), 500


@tags_bp.route('/<tag_id>', methods=['DELETE'])
@admin_required
def delete_tag(tag_id):
    """Delete a tag and its project associations"""
    try:
        tag = db.session.get(Tag, tag_id)
        if tag is None:
            return jsonify({'error': 'Tag not found'}), 404
        delete_tag_db(tag)
        return jsonify({'success': True})
    except Exception as e:
        db.session.rollback()
        print(f"Error deleting tag: {e}")
        LoggingService.log_error_with_traceback('tags', e, {'tag_id': tag_id})
        return jsonify({'error': 'Failed to delete tag'}), 500
