import secrets
from datetime import timedelta

from sqlalchemy import func

from ...core.database import db, utcnow
from ...core.models import Account, User, UserSession, VerificationToken


class AuthDatabase:

    @staticmethod
    def get_user_by_id(user_id):
        """Get user by ID"""
        if not user_id:
            return None
        return db.session.get(User, user_id)

    @staticmethod
    def get_user_by_email(email):
        """Get user by email address (case-insensitive)"""
        if not email:
            return None
        return User.query.filter(func.lower(User.email) == email.strip().lower()).first()

    @staticmethod
    def upsert_oauth_user(email, name, image, provider, provider_account_id,
                          is_admin, token=None, email_verified=True):
        """Create or update the user and linked account for an OAuth sign-in.

        is_admin is overwritten on every call so the allowlist stays authoritative.
        """
        token = token or {}
        email = email.strip().lower()

        user = AuthDatabase.get_user_by_email(email)
        if user is None:
            user = User(email=email)
            db.session.add(user)

        user.name = name or user.name
        user.image = image or user.image
        user.is_admin = bool(is_admin)
        if email_verified and user.email_verified is None:
            user.email_verified = utcnow()
        db.session.flush()

        account = Account.query.filter_by(
            provider=provider, provider_account_id=provider_account_id
        ).first()
        if account is None:
            account = Account(provider=provider, provider_account_id=provider_account_id,
                              type='oauth', user_id=user.id)
            db.session.add(account)

        account.user_id = user.id
        account.access_token = token.get('access_token')
        account.refresh_token = token.get('refresh_token') or account.refresh_token
        account.expires_at = token.get('expires_at')
        account.token_type = token.get('token_type')
        account.scope = token.get('scope')
        account.id_token = token.get('id_token')

        db.session.commit()
        return user

    @staticmethod
    def create_session(user_id, max_age_days=30):
        """Persist a new session row and return it"""
        user_session = UserSession(
            session_token=secrets.token_urlsafe(32),
            user_id=user_id,
            expires=utcnow() + timedelta(days=max_age_days),
        )
        db.session.add(user_session)
        db.session.commit()
        return user_session

    @staticmethod
    def get_session_by_token(session_token):
        """Get the persisted session row for a token (expired rows included)"""
        if not session_token:
            return None
        return UserSession.query.filter_by(session_token=session_token).first()

    @staticmethod
    def delete_session(session_token):
        """Delete a session row"""
        if not session_token:
            return False
        deleted = UserSession.query.filter_by(session_token=session_token).delete()
        db.session.commit()
        return deleted > 0

    @staticmethod
    def purge_expired():
        """Delete expired sessions and verification tokens. Returns rows removed."""
        now = utcnow()
        removed = UserSession.query.filter(UserSession.expires <= now).delete()
        removed += VerificationToken.query.filter(VerificationToken.expires <= now).delete()
        db.session.commit()
        return removed
