from ...core.database import db
from ...core.models import SiteSetting

ABOUT_KEYS = [
    'about.page_title',
    'about.page_tagline',
    'about.our_story_heading',
    'about.our_story_body',
    'about.what_we_do',
]


def parse_keys(raw):
    """Comma-separated keys, trimmed, blanks dropped. None means the About defaults."""
    if raw is None:
        return list(ABOUT_KEYS)
    return [key.strip() for key in raw.split(',') if key.strip()]


def get_settings_db(keys):
    """Values for keys; keys with no row map to None"""
    rows = SiteSetting.query.filter(SiteSetting.key.in_(keys)).all()
    stored = {row.key: row.value for row in rows}
    return {key: stored.get(key) for key in keys}


def upsert_setting_db(key, value):
    setting = db.session.get(SiteSetting, key)
    if setting is None:
        setting = SiteSetting(key=key, value=value)
        db.session.add(setting)
    else:
        setting.value = value
    db.session.commit()
    return setting
