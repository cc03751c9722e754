"""
Projects Routes
===============

Public reads and admin-only writes for portfolio projects.
Create/update take multipart/form-data so images arrive with the fields.
"""

from flask import g, jsonify, request

from . import projects_bp
from .database import (add_project_images_db, get_all_projects_db, get_project_db,
                       get_project_years_db, reorder_projects_db, set_cover_db,
                       set_project_tags_db)
from .images import (ImageValidationError, cleanup_uploads, get_image_files,
                     parse_thumbnail_index, read_validated_images, upload_images)
from ..auth.guards import admin_required
from ..tags.database import parse_tag_names
from ...core import storage
from ...core.database import db
from ...core.logging_service import LoggingService
from ...core.models import Project


def _admin_id():
    admin = g.get('admin_user')
    return admin.id if admin else None


def _get_title():
    title = request.form.get('title')
    if not isinstance(title, str) or not title.strip():
        return None
    return title.strip()


def _get_description():
    description = request.form.get('description')
    if description is None:
        return None
    return description.strip() or None


# ===== Public =====

@projects_bp.route('', methods=['GET'])
def get_projects():
    """List projects, optionally filtered by tag, featured and year"""
    try:
        tag = request.args.get('tag', '').strip() or None

        featured = request.args.get('featured')
        featured = None if featured in (None, '') else featured == 'true'

        # Unparseable years are ignored rather than rejected
        year = request.args.get('year', type=int)

        projects = get_all_projects_db(tag=tag, featured=featured, year=year)
        return jsonify([p.to_dict() for p in projects])
    except Exception as e:
        print(f"Error getting projects: {e}")
        LoggingService.log_error_with_traceback('projects', e)
        return jsonify({'error': 'Failed to fetch projects'}), 500


@projects_bp.route('/years', methods=['GET'])
def get_project_years():
    """Distinct years that have projects, newest first"""
    try:
        return jsonify(get_project_years_db())
    except Exception as e:
        print(f"Error getting project years: {e}")
        LoggingService.log_error_with_traceback('projects', e)
        return jsonify({'error': 'Failed to fetch years'}), 500


@projects_bp.route('/<project_id>', methods=['GET'])
def get_project(project_id):
    """Get single project"""
    try:
        project = get_project_db(project_id)
        if project:
            return jsonify(project.to_dict())
        return jsonify({'error': 'Project not found'}), 404
    except Exception as e:
        print(f"Error getting project: {e}")
        LoggingService.log_error_with_traceback('projects', e, {'project_id': project_id})
        return jsonify({'error': 'Failed to fetch project'}), 500


# ===== Admin =====

@projects_bp.route('', methods=['POST'])
@admin_required
def create_project():
    """Create a project with its images (multipart/form-data)"""
    title = _get_title()
    if not title:
        return jsonify({'error': 'Title is required'}), 400

    try:
        images = read_validated_images(get_image_files(request.files))
    except ImageValidationError as e:
        return jsonify({'error': str(e)}), 400

    uploaded_public_ids = []
    try:
        folder = storage.generate_project_folder()
        uploaded = upload_images(images, folder, uploaded_public_ids)

        project = Project(
            title=title,
            description=_get_description(),
            featured=request.form.get('featured') == 'true',
            cloudinary_folder=folder,
        )
        db.session.add(project)
        add_project_images_db(project, uploaded)
        set_project_tags_db(project, parse_tag_names(request.form.get('tags')))
        set_cover_db(project, parse_thumbnail_index(request.form.get('thumbnail_index'), len(uploaded)))
        db.session.commit()

        LoggingService.log_user_action('projects', 'create_project', user_id=_admin_id(),
                                       details={'project_id': project.id, 'images': len(uploaded)})
        return jsonify(project.to_dict()), 201

    except Exception as e:
        db.session.rollback()
        cleanup_uploads(uploaded_public_ids)
        print(f"Error creating project: {e}")
        LoggingService.log_error_with_traceback('projects', e)
        return jsonify({'error': 'Failed to create project'}), 500


@projects_bp.route('/order', methods=['PATCH'])
@admin_required
def update_project_order():
    """Reorder projects by rewriting created_at within each calendar day"""
    data = request.get_json(silent=True)
    ordered_ids = data.get('ordered_ids') if isinstance(data, dict) else None
    if not isinstance(ordered_ids, list) or not ordered_ids:
        return jsonify({'error': 'ordered_ids must be a non-empty array of project IDs'}), 400

    ordered_ids = [i.strip() for i in ordered_ids if isinstance(i, str) and i.strip()]
    if not ordered_ids:
        return jsonify({'error': 'ordered_ids must contain at least one valid project ID'}), 400

    try:
        updates = reorder_projects_db(ordered_ids)
        LoggingService.log_user_action('projects', 'reorder_projects', user_id=_admin_id(),
                                       details={'requested': len(ordered_ids), 'updated': len(updates)})
        return jsonify({'success': True})
    except Exception as e:
        print(f"Error updating project order: {e}")
        LoggingService.log_error_with_traceback('projects', e)
        return jsonify({'error': 'Failed to update project order'}), 500


@projects_bp.route('/<project_id>', methods=['PATCH'])
@admin_required
def update_project(project_id):
    """Update fields, tags and the image gallery of a project (multipart/form-data)"""
    project = get_project_db(project_id)
    if project is None:
        return jsonify({'error': 'Project not found'}), 404

    title = _get_title()
    if not title:
        return jsonify({'error': 'Title is required'}), 400

    try:
        images = read_validated_images(get_image_files(request.files))
    except ImageValidationError as e:
        return jsonify({'error': str(e)}), 400

    form = request.form
    remove_all = form.get('remove_image') == 'true'
    has_keep_list = 'keep_public_ids' in form
    existing = sorted(project.images, key=lambda img: img.sort_order)

    if remove_all:
        if not images:
            return jsonify({'error': 'At least one image is required. '
                                     'Add new images before removing all.'}), 400
        kept = []
        to_delete = existing
    elif has_keep_list or images:
        keep_ids = set(form.getlist('keep_public_ids')) if has_keep_list \
            else {img.image_public_id for img in existing}
        kept = [img for img in existing if img.image_public_id in keep_ids]
        to_delete = [img for img in existing if img.image_public_id not in keep_ids]
        if not kept and not images:
            return jsonify({'error': 'At least one image is required'}), 400
    else:
        kept = existing
        to_delete = []

    images_changed = remove_all or bool(to_delete) or bool(images)

    # Remote deletes first; a failure leaves the project row untouched
    delete_ids = [img.image_public_id for img in to_delete]
    if remove_all and project.image_public_id and project.image_public_id not in delete_ids:
        delete_ids.append(project.image_public_id)
    delete_error = 'Failed to delete existing image' if remove_all else 'Failed to delete project image'
    for public_id in delete_ids:
        try:
            storage.delete_image(public_id)
        except Exception as e:
            print(f"Error deleting image {public_id}: {e}")
            LoggingService.log_error_with_traceback('storage', e, {'public_id': public_id})
            return jsonify({'error': delete_error}), 500

    uploaded_public_ids = []
    try:
        for img in to_delete:
            project.images.remove(img)
        for index, img in enumerate(kept):
            img.sort_order = index

        if images:
            folder = storage.folder_for_project(project)
            uploaded = upload_images(images, folder, uploaded_public_ids)
            add_project_images_db(project, uploaded, start_order=len(kept))
            project.cloudinary_folder = project.cloudinary_folder or folder

        project.title = title
        if 'description' in form:
            project.description = _get_description()
        if 'featured' in form:
            project.featured = form.get('featured') == 'true'
        if 'tags' in form:
            set_project_tags_db(project, parse_tag_names(form.get('tags')))

        thumbnail_index = parse_thumbnail_index(form.get('thumbnail_index'), len(project.images))
        if images_changed or thumbnail_index is not None:
            set_cover_db(project, thumbnail_index)

        db.session.commit()

        LoggingService.log_user_action('projects', 'update_project', user_id=_admin_id(),
                                       details={'project_id': project.id,
                                                'removed_images': len(delete_ids),
                                                'added_images': len(uploaded_public_ids)})
        return jsonify(project.to_dict())

    except Exception as e:
        db.session.rollback()
        cleanup_uploads(uploaded_public_ids)
        print(f"Error updating project: {e}")
        LoggingService.log_error_with_traceback('projects', e, {'project_id': project_id})
        return jsonify({'error': 'Failed to update project'}), 500


@projects_bp.route('/<project_id>', methods=['DELETE'])
@admin_required
def delete_project(project_id):
    """Delete project, its remote images and its folder"""
    try:
        project = get_project_db(project_id)
        if project is None:
            return jsonify({'error': 'Project not found'}), 404

        public_ids = [img.image_public_id for img in project.images]
        if project.image_public_id and project.image_public_id not in public_ids:
            public_ids.append(project.image_public_id)

        for public_id in public_ids:
            try:
                storage.delete_image(public_id)
            except Exception as e:
                print(f"Error deleting image {public_id}: {e}")
                LoggingService.log_error_with_traceback('storage', e, {'public_id': public_id})
                return jsonify({'error': 'Failed to delete project image'}), 500

        if project.cloudinary_folder:
            try:
                storage.delete_folder(project.cloudinary_folder)
            except Exception as e:
                LoggingService.warning('storage', f"Failed to delete folder {project.cloudinary_folder}: {e}")

        db.session.delete(project)
        db.session.commit()

        LoggingService.log_user_action('projects', 'delete_project', user_id=_admin_id(),
                                       details={'project_id': project_id})
        return jsonify({'success': True})
    except Exception as e:
        db.session.rollback()
        print(f"Error deleting project: {e}")
        LoggingService.log_error_with_traceback('projects', e, {'project_id': project_id})
        return jsonify({'error': 'Failed to delete project'}), 500
