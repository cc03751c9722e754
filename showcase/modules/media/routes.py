from flask import g, jsonify, request

from . import media_bp
from ..auth.guards import admin_required
from ...core import storage
from ...core.database import db
from ...core.logging_service import LoggingService
from ...core.models import Project


@media_bp.route('/cloudinary-config', methods=['GET'])
@admin_required
def cloudinary_config():
    """Signed upload params for a project's folder (new folder when no project is given)"""
    try:
        project_id = request.args.get('project_id')
        project = db.session.get(Project, project_id) if project_id else None
        if project is not None:
            folder = storage.folder_for_project(project)
        else:
            folder = storage.generate_project_folder()

        return jsonify(storage.get_signed_upload_params(folder))
    except storage.StorageError as e:
        return jsonify({'error': str(e)}), 503
    except Exception as e:
        print(f"Error building Cloudinary config: {e}")
        LoggingService.log_error_with_traceback('storage', e)
        return jsonify({'error': 'Cloudinary not configured'}), 503


@media_bp.route('/cloudinary-delete', methods=['POST'])
@admin_required
def cloudinary_delete():
    """Delete one asset unless a project still uses it (force overrides)"""
    data = request.get_json(silent=True) or {}
    public_id = data.get('public_id') if isinstance(data, dict) else None
    if not isinstance(public_id, str) or not public_id.strip():
        return jsonify({'error': 'public_id is required'}), 400
    public_id = public_id.strip()

    try:
        if data.get('force') is not True:
            references = storage.check_image_in_use(public_id)
            if references:
                return jsonify({'in_use': True, 'references': references})

        storage.delete_image(public_id)
        LoggingService.log_user_action('storage', 'delete_image', user_id=g.admin_user.id,
                                       details={'public_id': public_id, 'force': data.get('force') is True})
        return jsonify({'success': True})
    except Exception as e:
        print(f"Error deleting image {public_id}: {e}")
        LoggingService.log_error_with_traceback('storage', e, {'public_id': public_id})
        return jsonify({'error': 'Failed to delete image'}), 500


@media_bp.route('/cloudinary-cleanup', methods=['POST'])
@admin_required
def cloudinary_cleanup():
    """Delete direct uploads that never made it into a project"""
    data = request.get_json(silent=True)
    public_ids = data.get('public_ids') if isinstance(data, dict) else None
    if not isinstance(public_ids, list) or not public_ids:
        return jsonify({'error': 'public_ids must be a non-empty array'}), 400

    deleted, skipped, failed = [], [], []
    for public_id in public_ids:
        if not isinstance(public_id, str) or not public_id.strip():
            continue
        public_id = public_id.strip()
        try:
            if storage.check_image_in_use(public_id):
                skipped.append(public_id)
                continue
            storage.delete_image(public_id)
            deleted.append(public_id)
        except Exception as e:
            print(f"Error cleaning up image {public_id}: {e}")
            LoggingService.log_error_with_traceback('storage', e, {'public_id': public_id})
            failed.append(public_id)

    if deleted or failed:
        LoggingService.info('storage', 'Orphaned upload cleanup',
                            {'deleted': deleted, 'skipped': skipped, 'failed': failed},
                            user_id=g.admin_user.id)
    return jsonify({'deleted': deleted, 'skipped': skipped, 'failed': failed})
