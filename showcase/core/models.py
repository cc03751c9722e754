"""
Showcase Models
===============

SQLAlchemy models for content (projects, images, tags, page copy),
OAuth sign-in (users, accounts, sessions, verification tokens) and app logs.
"""

from sqlalchemy.orm import validates

from .database import db, utcnow, new_id


# ===== Auth =====

class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(255))
    image = db.Column(db.String(1024))
    email_verified = db.Column(db.DateTime)
    # Sole authorization flag, synced from ADMIN_EMAILS on sign-in
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    accounts = db.relationship('Account', back_populates='user',
                               cascade='all, delete-orphan')
    sessions = db.relationship('UserSession', back_populates='user',
                               cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'image': self.image,
            'is_admin': bool(self.is_admin),
        }


class Account(db.Model):
    __tablename__ = 'accounts'
    __table_args__ = (
        db.UniqueConstraint('provider', 'provider_account_id', name='uq_accounts_provider'),
    )

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    user_id = db.Column(db.String(32), db.ForeignKey('users.id', ondelete='CASCADE'),
                        nullable=False, index=True)
    type = db.Column(db.String(32), nullable=False, default='oauth')
    provider = db.Column(db.String(64), nullable=False)
    provider_account_id = db.Column(db.String(255), nullable=False)
    access_token = db.Column(db.Text)
    refresh_token = db.Column(db.Text)
    expires_at = db.Column(db.Integer)
    token_type = db.Column(db.String(32))
    scope = db.Column(db.Text)
    id_token = db.Column(db.Text)

    user = db.relationship('User', back_populates='accounts')


class UserSession(db.Model):
    __tablename__ = 'sessions'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    session_token = db.Column(db.String(255), unique=True, nullable=False, index=True)
    user_id = db.Column(db.String(32), db.ForeignKey('users.id', ondelete='CASCADE'),
                        nullable=False, index=True)
    expires = db.Column(db.DateTime, nullable=False)

    user = db.relationship('User', back_populates='sessions')

    def is_expired(self, now=None):
        return self.expires <= (now or utcnow())


class VerificationToken(db.Model):
    __tablename__ = 'verification_tokens'
    __table_args__ = (
        db.UniqueConstraint('identifier', 'token', name='uq_verification_tokens_identifier'),
    )

    token = db.Column(db.String(255), primary_key=True)
    identifier = db.Column(db.String(255), nullable=False)
    expires = db.Column(db.DateTime, nullable=False)


# ===== Content =====

class Project(db.Model):
    __tablename__ = 'projects'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    # Cover image, one of images[] (or None)
    image_url = db.Column(db.String(1024))
    image_public_id = db.Column(db.String(255))
    cloudinary_folder = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    images = db.relationship('ProjectImage', back_populates='project',
                             order_by='ProjectImage.sort_order',
                             cascade='all, delete-orphan')
    project_tags = db.relationship('ProjectTag', back_populates='project',
                                   cascade='all, delete-orphan')

    @property
    def tag_names(self):
        return [pt.tag.name for pt in self.project_tags if pt.tag is not None]

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'featured': bool(self.featured),
            'image_url': self.image_url,
            'image_public_id': self.image_public_id,
            'cloudinary_folder': self.cloudinary_folder,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'images': [img.to_dict() for img in self.images],
            'tags': self.tag_names,
        }


class ProjectImage(db.Model):
    __tablename__ = 'project_images'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    project_id = db.Column(db.String(32), db.ForeignKey('projects.id', ondelete='CASCADE'),
                           nullable=False, index=True)
    image_url = db.Column(db.String(1024), nullable=False)
    image_public_id = db.Column(db.String(255), nullable=False, index=True)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    project = db.relationship('Project', back_populates='images')

    def to_dict(self):
        return {
            'id': self.id,
            'image_url': self.image_url,
            'image_public_id': self.image_public_id,
            'sort_order': self.sort_order,
        }


class Tag(db.Model):
    __tablename__ = 'tags'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(128), unique=True, nullable=False)
    # Casefolded name; SQLite lower() only folds ASCII
    name_key = db.Column(db.String(128), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    project_tags = db.relationship('ProjectTag', back_populates='tag',
                                   cascade='all, delete-orphan')

    @staticmethod
    def key_for(name):
        return name.strip().casefold()

    @validates('name')
    def _set_name_key(self, _key, name):
        self.name_key = Tag.key_for(name)
        return name

    def to_dict(self):
        return {'id': self.id, 'name': self.name}


class ProjectTag(db.Model):
    __tablename__ = 'project_tags'

    project_id = db.Column(db.String(32), db.ForeignKey('projects.id', ondelete='CASCADE'),
                           primary_key=True)
    tag_id = db.Column(db.String(32), db.ForeignKey('tags.id', ondelete='CASCADE'),
                       primary_key=True)

    project = db.relationship('Project', back_populates='project_tags')
    tag = db.relationship('Tag', back_populates='project_tags')


class SiteSetting(db.Model):
    __tablename__ = 'site_settings'

    key = db.Column(db.String(255), primary_key=True)
    value = db.Column(db.Text, nullable=False, default='')
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)


# ===== Logging =====

class AppLog(db.Model):
    __tablename__ = 'app_logs'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    level = db.Column(db.String(16), nullable=False, index=True)
    source = db.Column(db.String(64), nullable=False, index=True)
    message = db.Column(db.Text, nullable=False)
    details = db.Column(db.Text)
    ip_address = db.Column(db.String(64))
    user_agent = db.Column(db.Text)
    request_path = db.Column(db.String(1024))
    user_id = db.Column(db.String(32))
