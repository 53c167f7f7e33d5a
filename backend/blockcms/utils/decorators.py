from functools import wraps
from flask import g
from flask_jwt_extended import jwt_required

from blockcms.domain.exceptions import AccessDenied


def cms_access_required(fn):
    """
    Logged in user with a CMS role. Guests and plain users are denied
    before any content is loaded.
    """
    @wraps(fn)
    @jwt_required()
    def wrapper(*args, **kwargs):
        user = getattr(g, "current_user", None)
        if user is None or not user.can_access_cms():
            raise AccessDenied("CMS access required")

        return fn(*args, **kwargs)
    return wrapper
