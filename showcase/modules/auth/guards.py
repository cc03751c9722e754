"""
Admin Guards
============

Decides, per request, whether the caller is an authenticated administrator.

Two identity sources are consulted:
- the signed Flask session (user_id / email / session_token written at
  sign-in), which may be stale relative to the database;
- the session-token cookie, mapped to a persisted session row with an expiry.

Both sources are only honoured while their session row exists and has not
expired, so sign-out and expiry end the session even for a replayed cookie.
Every grant is confirmed against the users table, so revoking is_admin in the
database takes effect on the caller's next request.
"""

import re
from collections import namedtuple
from functools import wraps
from urllib.parse import unquote

from flask import g, jsonify, request, session

from ...core.logging_service import LoggingService
from .database import AuthDatabase
from .utils import session_token_cookie_names

SessionPayload = namedtuple('SessionPayload', ['user_id', 'email', 'session_token'])

# ok=True: user is the confirmed admin. ok=False: response is a (json, status) pair.
AdminCheck = namedtuple('AdminCheck', ['ok', 'user', 'response'])


def get_session_payload():
    """Identity claims from the signed session cookie, or None"""
    user_id = session.get('user_id')
    email = session.get('email')
    if not user_id and not email:
        return None
    return SessionPayload(user_id, email, session.get('session_token'))


def get_live_session(session_token):
    """The persisted session row for a token, or None if missing or expired"""
    if not session_token:
        return None
    user_session = AuthDatabase.get_session_by_token(session_token)
    if user_session is None or user_session.is_expired():
        return None
    return user_session


def resolve_payload_user(payload):
    """Look the payload's user up by id, then by email"""
    user = AuthDatabase.get_user_by_id(payload.user_id)
    if user is None:
        user = AuthDatabase.get_user_by_email(payload.email)
    return user


def get_session_token_from_request(req=None):
    """Read the session token from the request cookies.

    Falls back to parsing the raw Cookie header, accepting both the plain and
    the __Secure- prefixed cookie names.
    """
    req = req if req is not None else request
    names = session_token_cookie_names()

    cookies = getattr(req, 'cookies', None) or {}
    for name in names:
        token = cookies.get(name)
        if token:
            return token

    header = req.headers.get('Cookie') if getattr(req, 'headers', None) is not None else None
    if not header:
        return None
    pattern = r'(?:^|;)\s*(?:{})=([^;]+)'.format('|'.join(re.escape(n) for n in names))
    match = re.search(pattern, header)
    return unquote(match.group(1).strip()) if match else None


def _deny(status, reason, details=None):
    LoggingService.log_security_event(f"Admin guard denied ({status}): {reason}", details)
    error = 'Unauthorized' if status == 401 else 'Forbidden'
    return AdminCheck(False, None, (jsonify({'error': error}), status))


def verify_admin(req=None):
    """Check that the current request belongs to an admin.

    Order of checks:
    1. No session payload and no session token -> 401.
    2. Session payload: honoured only while the session row it was issued
       with is live. Look the user up by id, then by email. An admin user
       is authorized; a non-admin user is remembered and the token lookup
       still runs.
    3. Session token: a non-expired session row whose user is admin is
       authorized; any other non-expired row -> 403. Missing or expired
       rows fall through.
    4. Otherwise 403 if a non-admin user was identified, else 401.

    Returns:
        AdminCheck(ok, user, response)
    """
    payload = get_session_payload()
    token = get_session_token_from_request(req)

    if payload is None and not token:
        return _deny(401, 'no session')

    identified_user = None

    if payload is not None and get_live_session(payload.session_token) is not None:
        user = resolve_payload_user(payload)
        if user is not None:
            if user.is_admin:
                return AdminCheck(True, user, None)
            identified_user = user

    if token:
        user_session = get_live_session(token)
        if user_session is not None:
            user = user_session.user
            if user is not None and user.is_admin:
                return AdminCheck(True, user, None)
            return _deny(403, 'session user is not admin',
                         {'user_id': user.id if user else None})

    if identified_user is not None:
        return _deny(403, 'session user is not admin', {'user_id': identified_user.id})

    return _deny(401, 'no valid session', {
        'has_payload': payload is not None,
        'has_token': bool(token),
    })


def admin_required(f):
    """Decorator to require an admin session; returns the guard's 401/403 otherwise"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        check = verify_admin()
        if not check.ok:
            return check.response
        g.admin_user = check.user
        return f(*args, **kwargs)
    return decorated_function
