from flask import g
from flask_jwt_extended import verify_jwt_in_request, get_current_user

from blockcms.extensions import db, jwt
from blockcms.models.user import User, Guest


@jwt.user_lookup_loader
def load_user(_jwt_header, jwt_data):
    return db.session.get(User, jwt_data["sub"])


def current_user_middleware(app):
    @app.before_request
    def load_current_user():
        # Anonymous requests carry no token and browse as a Guest.
        # Token type is checked by the routes themselves.
        decoded = verify_jwt_in_request(optional=True, verify_type=False)

        user = get_current_user() if decoded else None
        if user is None or not user.is_active:
            user = Guest()

        # Attach user to global context
        g.current_user = user
