from blockcms.extensions import db
from .base import BaseModel

class Page(BaseModel):
    __tablename__ = 'pages'

    name = db.Column(db.String(200), nullable=False)
    path = db.Column(db.String(200), unique=True, nullable=False, index=True)
    section_id = db.Column(db.String(36), db.ForeignKey("sections.id"), nullable=True)

    section = db.relationship("Section")

    # Blocks placed on this page, one connector per container slot
    connectors = db.relationship(
        "PageConnector",
        back_populates="page",
        cascade="all, delete-orphan"
    )
