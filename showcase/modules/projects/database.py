from datetime import datetime, time, timedelta

from sqlalchemy import extract

from ...core.database import db
from ...core.models import Project, ProjectImage, ProjectTag, Tag
from ..tags.database import resolve_tag_names_to_ids


# ===== Queries =====

def get_all_projects_db(tag=None, featured=None, year=None):
    """Projects ordered newest first, optionally filtered"""
    query = Project.query
    if tag:
        query = query.filter(Project.project_tags.any(
            ProjectTag.tag.has(Tag.name_key == Tag.key_for(tag))
        ))
    if featured is not None:
        query = query.filter(Project.featured == featured)
    if year is not None:
        query = query.filter(extract('year', Project.created_at) == year)
    return query.order_by(Project.created_at.desc()).all()


def get_project_years_db():
    """Distinct created_at years, newest first"""
    year = extract('year', Project.created_at)
    rows = db.session.query(year).distinct().order_by(year.desc()).all()
    return [int(row[0]) for row in rows]


def get_project_db(project_id):
    if not project_id:
        return None
    return db.session.get(Project, project_id)


# ===== Writes (callers commit) =====

def set_project_tags_db(project, tag_names):
    """Replace a project's tag set"""
    tag_ids = resolve_tag_names_to_ids(tag_names)
    project.project_tags = [ProjectTag(tag_id=tag_id) for tag_id in tag_ids]


def add_project_images_db(project, uploaded, start_order=0):
    for index, result in enumerate(uploaded):
        project.images.append(ProjectImage(
            image_url=result['secure_url'],
            image_public_id=result['public_id'],
            sort_order=start_order + index,
        ))


def set_cover_db(project, image_index=None):
    """Point the cover at images[image_index] (or the first image, or nothing)"""
    images = sorted(project.images, key=lambda img: img.sort_order)
    if not images:
        project.image_url = None
        project.image_public_id = None
        return
    cover = images[image_index] if image_index is not None else images[0]
    project.image_url = cover.image_url
    project.image_public_id = cover.image_public_id


# ===== Reordering =====

def compute_reorder_timestamps(ordered_ids, created_by_id):
    """New created_at values for a manual reorder.

    Projects are grouped by the calendar day of created_at. Inside a group the
    listed order becomes strictly decreasing timestamps one millisecond apart,
    anchored at the group's latest timestamp and never leaving that day.

    Args:
        ordered_ids: Project IDs in the desired display order.
        created_by_id: dict of project ID -> current created_at. IDs missing
            from it are ignored.

    Returns:
        list of (project_id, new_created_at) in ordered_ids order.
    """
    step = timedelta(milliseconds=1)

    groups = {}
    for project_id in ordered_ids:
        created_at = created_by_id.get(project_id)
        if created_at is None:
            continue
        members = groups.setdefault(created_at.date(), [])
        if project_id not in members:
            members.append(project_id)

    new_times = {}
    for day, members in groups.items():
        anchor = max(created_by_id[pid] for pid in members)
        day_start = datetime.combine(day, time.min)
        # Shift the anchor up when the run would cross midnight into the previous day
        earliest = anchor - step * (len(members) - 1)
        if earliest < day_start:
            anchor = day_start + step * (len(members) - 1)
        for index, project_id in enumerate(members):
            new_times[project_id] = anchor - step * index

    result = []
    for project_id in ordered_ids:
        if project_id in new_times:
            result.append((project_id, new_times.pop(project_id)))
    return result


def reorder_projects_db(ordered_ids):
    """Apply a manual reorder in one transaction. Unknown IDs are ignored."""
    rows = db.session.query(Project.id, Project.created_at).filter(Project.id.in_(ordered_ids)).all()
    created_by_id = {row.id: row.created_at for row in rows}

    updates = compute_reorder_timestamps(ordered_ids, created_by_id)
    try:
        for project_id, created_at in updates:
            db.session.query(Project).filter(Project.id == project_id).update(
                {Project.created_at: created_at}, synchronize_session=False
            )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return updates
