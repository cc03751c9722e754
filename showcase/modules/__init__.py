"""
Showcase Modules
================

Flask blueprint modules registered by the Showcase extension.
"""

__all__ = ['auth', 'projects', 'tags', 'site_settings', 'media', 'health']
