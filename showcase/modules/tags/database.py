import json

from sqlalchemy import func

from ...core.database import db
from ...core.models import ProjectTag, Tag


def parse_tag_names(raw):
    """Parse a JSON array string of tag names.

    Invalid JSON or anything that is not a list yields [].
    """
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return []
    if not isinstance(parsed, list):
        return []
    return [item.strip() for item in parsed if isinstance(item, str) and item.strip()]


def resolve_tag_names_to_ids(names):
    """Map tag names to tag IDs, creating missing tags.

    Names are trimmed, blanks dropped and duplicates removed case-insensitively
    (first occurrence wins). Returns IDs in first-occurrence order. Does not commit.
    """
    unique = []
    seen = set()
    for name in names or []:
        if not isinstance(name, str):
            continue
        name = name.strip()
        if not name or Tag.key_for(name) in seen:
            continue
        seen.add(Tag.key_for(name))
        unique.append(name)

    if not unique:
        return []

    existing = Tag.query.filter(Tag.name_key.in_([Tag.key_for(n) for n in unique])).all()
    by_key = {tag.name_key: tag for tag in existing}

    ids = []
    for name in unique:
        tag = by_key.get(Tag.key_for(name))
        if tag is None:
            tag = Tag(name=name)
            db.session.add(tag)
            db.session.flush()
            by_key[tag.name_key] = tag
        ids.append(tag.id)
    return ids


def get_tag_by_name_db(name, exclude_id=None):
    """Case-insensitive lookup, optionally ignoring one tag (for renames)"""
    query = Tag.query.filter(Tag.name_key == Tag.key_for(name))
    if exclude_id:
        query = query.filter(Tag.id != exclude_id)
    return query.first()


def get_all_tags_db():
    """All tags with the number of projects using each, ordered by name"""
    rows = (
        db.session.query(Tag, func.count(ProjectTag.project_id))
        .outerjoin(ProjectTag, ProjectTag.tag_id == Tag.id)
        .group_by(Tag.id)
        .order_by(Tag.name.asc())
        .all()
    )
    tags = []
    for tag, count in rows:
        data = tag.to_dict()
        data['project_count'] = count
        tags.append(data)
    return tags


def create_tag_db(name):
    tag = Tag(name=name.strip())
    db.session.add(tag)
    db.session.commit()
    return tag


def rename_tag_db(tag, name):
    tag.name = name.strip()
    db.session.commit()
    return tag


def delete_tag_db(tag):
    """Delete a tag; its project links go with it, the projects stay"""
    db.session.delete(tag)
    db.session.commit()
