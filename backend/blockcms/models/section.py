from blockcms.extensions import db
from .base import BaseModel

class Section(BaseModel):
    __tablename__ = "sections"

    name = db.Column(db.String(200), nullable=False)
    path = db.Column(db.String(200), unique=True, nullable=False, index=True)
    parent_id = db.Column(db.String(36), db.ForeignKey("sections.id"), nullable=True)

    parent = db.relationship("Section", remote_side="Section.id")

    @classmethod
    def with_path(cls, path):
        return cls.query.filter_by(path=path)
