"""
Tags Module
===========

Tag CRUD for the projects portfolio plus the name -> id resolution helper
used when saving a project's tag set.
"""

from flask import Blueprint

tags_bp = Blueprint('tags', __name__, url_prefix='/api/tags')

from . import routes
from .database import parse_tag_names, resolve_tag_names_to_ids

__all__ = ['tags_bp', 'parse_tag_names', 'resolve_tag_names_to_ids']
