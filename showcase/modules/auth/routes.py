from flask import current_app, jsonify, make_response, redirect, request, session, url_for
from authlib.integrations.base_client import OAuthError

from . import auth_bp
from .database import AuthDatabase
from .guards import (get_live_session, get_session_payload,
                     get_session_token_from_request, resolve_payload_user)
from .utils import GOOGLE_USERINFO_URL, is_admin_email, is_safe_redirect, oauth, session_token_cookie_names
from ...core.logging_service import LoggingService

SUPPORTED_PROVIDERS = ('google',)
DEFAULT_REDIRECT = '/admin'


def _get_client(provider):
    if provider not in SUPPORTED_PROVIDERS:
        return None
    return oauth.create_client(provider)


def _set_session_cookie(response, user_session):
    """Write the session-token cookie; secure deployments get the __Secure- name"""
    plain_name, secure_name = session_token_cookie_names()
    secure = bool(current_app.config.get('SESSION_COOKIE_SECURE'))
    response.set_cookie(
        secure_name if secure else plain_name,
        user_session.session_token,
        expires=user_session.expires,
        httponly=True,
        samesite='Lax',
        secure=secure,
        path='/',
    )
    return response


def _clear_session_cookie(response):
    for name in session_token_cookie_names():
        response.delete_cookie(name, path='/')
    return response


# ===== OAuth =====

@auth_bp.route('/signin/<provider>')
def oauth_login(provider):
    """Initiate OAuth login"""
    if provider not in SUPPORTED_PROVIDERS:
        return jsonify({'error': 'Invalid authentication provider'}), 404

    client = _get_client(provider)
    if client is None:
        return jsonify({'error': 'OAuth not configured'}), 503

    next_url = request.args.get('next')
    if is_safe_redirect(next_url):
        session['oauth_next'] = next_url
    else:
        session.pop('oauth_next', None)

    redirect_uri = url_for('auth.oauth_callback', provider=provider, _external=True)
    return client.authorize_redirect(redirect_uri)


@auth_bp.route('/callback/<provider>')
def oauth_callback(provider):
    """Handle OAuth callback: upsert user + account, open a session"""
    if provider not in SUPPORTED_PROVIDERS:
        return jsonify({'error': 'Invalid authentication provider'}), 404

    client = _get_client(provider)
    if client is None:
        return jsonify({'error': 'OAuth not configured'}), 503

    try:
        token = client.authorize_access_token()
    except OAuthError as e:
        LoggingService.log_security_event(f"OAuth callback rejected: {e}", {'provider': provider})
        return jsonify({'error': 'Sign-in failed'}), 400

    try:
        user_info = token.get('userinfo')
        if not user_info:
            resp = client.get(GOOGLE_USERINFO_URL, token=token)
            user_info = resp.json()

        email = (user_info.get('email') or '').strip().lower()
        if not email:
            return jsonify({'error': 'Unable to retrieve email from your account'}), 400
        if user_info.get('email_verified') is False:
            LoggingService.log_security_event("Sign-in with unverified email", {'email': email})
            return jsonify({'error': 'Email address is not verified'}), 403

        admin = is_admin_email(email)
        user = AuthDatabase.upsert_oauth_user(
            email=email,
            name=user_info.get('name'),
            image=user_info.get('picture'),
            provider=provider,
            provider_account_id=str(user_info.get('sub') or email),
            is_admin=admin,
            token=token,
        )

        max_age_days = int(current_app.config.get('SESSION_MAX_AGE_DAYS') or 30)
        user_session = AuthDatabase.create_session(user.id, max_age_days=max_age_days)
        AuthDatabase.purge_expired()

        next_url = session.pop('oauth_next', None)

        session.clear()
        session.permanent = True
        session['user_id'] = user.id
        session['email'] = user.email
        session['session_token'] = user_session.session_token
        if user.is_admin:
            session['admin_id'] = user.id

        LoggingService.log_user_action('auth', 'sign_in', user_id=user.id,
                                       details={'provider': provider, 'is_admin': user.is_admin})

        response = make_response(redirect(next_url if is_safe_redirect(next_url) else DEFAULT_REDIRECT))
        return _set_session_cookie(response, user_session)

    except Exception as e:
        print(f"Error completing sign-in: {e}")
        LoggingService.log_error_with_traceback('auth', e, {'provider': provider})
        return jsonify({'error': 'Sign-in failed'}), 500


# ===== Session =====

@auth_bp.route('/signout', methods=['GET', 'POST'])
def signout():
    """Delete the persisted session and clear both cookies"""
    payload = get_session_payload()
    tokens = {get_session_token_from_request(), payload.session_token if payload else None}
    user_id = session.get('user_id')
    try:
        for token in tokens:
            AuthDatabase.delete_session(token)
    except Exception as e:
        print(f"Error deleting session: {e}")

    session.clear()
    if user_id:
        LoggingService.log_user_action('auth', 'sign_out', user_id=user_id)

    response = make_response(jsonify({'success': True}))
    return _clear_session_cookie(response)


@auth_bp.route('/session', methods=['GET'])
def get_session():
    """Current user, or {} when nobody is signed in"""
    try:
        user_session = get_live_session(get_session_token_from_request())
        if user_session is not None and user_session.user:
            return jsonify({
                'user': user_session.user.to_dict(),
                'expires': user_session.expires.isoformat(),
            })

        payload = get_session_payload()
        user_session = get_live_session(payload.session_token) if payload else None
        if user_session is not None:
            user = resolve_payload_user(payload)
            if user is not None:
                return jsonify({'user': user.to_dict(), 'expires': user_session.expires.isoformat()})

        return jsonify({})
    except Exception as e:
        print(f"Error getting session: {e}")
        return jsonify({'error': 'Failed to fetch session'}), 500
