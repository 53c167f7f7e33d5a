from datetime import datetime, timezone
import uuid
from blockcms.extensions import db


def utc_now():
    # Columns are naive, values are always UTC
    return datetime.now(timezone.utc)


def new_id():
    return str(uuid.uuid4())


class BaseModel(db.Model):
    """UUID primary key plus creation and modification timestamps."""
    __abstract__ = True

    id = db.Column(db.String(36), primary_key=True, default=new_id, index=True)
    created_at = db.Column(db.DateTime, default=utc_now, index=True)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now, index=True)

    def __repr__(self):
        return f"<{type(self).__name__} {self.id}>"
