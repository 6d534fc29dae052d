"""Token handling and the permission guards shared by the routes."""

from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import current_app, g, request

from students.errors import AuthenticationError, PermissionDeniedError, UserCausedError
from students.validation import to_object_id

ALGORITHM = "HS256"


def issue_token(user_id):
    expires = datetime.now(timezone.utc) + timedelta(seconds=current_app.config["JWT_EXPIRE"])
    payload = {"id": str(user_id), "exp": expires}
    return jwt.encode(payload, current_app.config["JWT_SECRET_KEY"], algorithm=ALGORITHM)


def set_token_cookie(response, token):
    config = current_app.config
    response.set_cookie(
        config["TOKEN_COOKIE_NAME"],
        token,
        max_age=config["JWT_EXPIRE"],
        secure=config["TOKEN_COOKIE_SECURE"],
        httponly=True,
        samesite="Strict",
    )
    return response


def clear_token_cookie(response):
    response.delete_cookie(current_app.config["TOKEN_COOKIE_NAME"])
    return response


def _request_token():
    # The Authorization header wins over the cookie
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split("Bearer ", 1)[1].strip()
    return request.cookies.get(current_app.config["TOKEN_COOKIE_NAME"])


def identify():
    """Return the ObjectId of the user the request is authenticated as."""
    token = _request_token()
    if not token:
        raise AuthenticationError("Not authenticated", "token")

    try:
        data = jwt.decode(token, current_app.config["JWT_SECRET_KEY"], algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired", "token")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Token is invalid", "token")

    user_id = data.get("id")
    if user_id is None:
        raise AuthenticationError("User id not found in token", "token")
    try:
        return to_object_id(user_id)
    except UserCausedError:
        raise AuthenticationError("Token is invalid", "token")


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        g.user_id = identify()
        return view(*args, **kwargs)

    return wrapped


def require_member(group, user_id=None):
    if not group.is_member(user_id or g.user_id):
        raise PermissionDeniedError("You are not a member of this group")


def require_creator(group):
    if not group.is_creator(g.user_id):
        raise PermissionDeniedError("Only the group creator can do this")


def require_self_or_creator(group, user_id):
    """Members act on themselves; the creator acts on anyone."""
    require_member(group)
    if to_object_id(user_id) != g.user_id and not group.is_creator(g.user_id):
        raise PermissionDeniedError("Only the group creator can manage other members")
