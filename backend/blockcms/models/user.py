from werkzeug.security import generate_password_hash, check_password_hash
from blockcms.extensions import db
from .base import BaseModel

# What each role may do in the content library
ROLE_CAPABILITIES = {
    "admin": {"cms", "edit", "publish"},
    "publisher": {"cms", "edit", "publish"},
    "editor": {"cms", "edit"},
    "user": set(),
}


class User(BaseModel):
    __tablename__ = 'users'

    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)

    role = db.Column(db.String(50), nullable=False, default='user')
    is_active = db.Column(db.Boolean, default=True)

    is_guest = False

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def _has(self, capability):
        return bool(self.is_active) and capability in ROLE_CAPABILITIES.get(self.role, set())

    def can_access_cms(self):
        return self._has("cms")

    def can_edit(self, block):
        return self._has("edit")

    def can_publish(self, block):
        return self._has("publish")

    def can_view(self, block):
        return self.can_access_cms() or bool(block.published)


class Guest:
    """The anonymous visitor. May only view published content."""

    id = None
    email = None
    role = "guest"
    is_active = True
    is_guest = True

    def can_access_cms(self):
        return False

    def can_edit(self, block):
        return False

    def can_publish(self, block):
        return False

    def can_view(self, block):
        return bool(block.published)
