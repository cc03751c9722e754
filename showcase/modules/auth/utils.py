from urllib.parse import urlsplit

from authlib.integrations.flask_client import OAuth

from ...core.config import get_config_value, get_admin_emails

# OAuth configuration
oauth = OAuth()

GOOGLE_USERINFO_URL = 'https://www.googleapis.com/oauth2/v3/userinfo'


def configure_oauth(app):
    """Configure the Google OAuth provider. Returns None when no credentials are set."""
    oauth.init_app(app)

    client_id = app.config.get('GOOGLE_CLIENT_ID')
    client_secret = app.config.get('GOOGLE_CLIENT_SECRET')
    if not client_id or not client_secret:
        print("Google OAuth credentials not set; sign-in is disabled")
        return None

    google = oauth.register(
        name='google',
        client_id=client_id,
        client_secret=client_secret,
        server_metadata_url='https://accounts.google.com/.well-known/openid-configuration',
        client_kwargs={
            'scope': 'openid email profile'
        }
    )
    return google


def is_admin_email(email):
    """Check an email against the ADMIN_EMAILS allowlist"""
    return bool(email) and email.strip().lower() in get_admin_emails()


def session_token_cookie_names():
    """Plain and __Secure- prefixed names of the session-token cookie"""
    name = get_config_value('SESSION_TOKEN_COOKIE', 'showcase.session-token')
    return name, f'__Secure-{name}'


def is_safe_redirect(target):
    """Only same-site relative paths are accepted as post-sign-in redirects"""
    if not target or not isinstance(target, str) or not target.startswith('/'):
        return False
    # Browsers read a backslash as a slash and drop tabs/newlines, so /\host is //host
    if target[1:2] in ('/', '\\') or any(ord(c) < 32 for c in target):
        return False
    parts = urlsplit(target.replace('\\', '/'))
    return not parts.scheme and not parts.netloc
