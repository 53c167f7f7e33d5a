from blockcms.extensions import db
from blockcms.models.content_type import ContentType
from blockcms.modules.news import NEWS_RELEASE

HTML_BLOCK = {
    "key": "html_block",
    "display_name": "Text",
    "path": "html_blocks",
    "supports_versioning": True,
    "connectable": True,
    "can_have_parent": False,
    "searchable": True,
    "supports_categories": False,
    "default_order": "name",
    "fields": ["content"],
    "required_fields": [],
}

LINK = {
    "key": "link",
    "display_name": "Link",
    "path": "links",
    "supports_versioning": False,
    "connectable": False,
    "can_have_parent": False,
    "searchable": False,
    "supports_categories": False,
    "default_order": "name",
    "fields": ["url", "target"],
    "required_fields": ["url"],
}

DEFAULT_CONTENT_TYPES = [HTML_BLOCK, NEWS_RELEASE, LINK]


def seed_content_types(definitions=DEFAULT_CONTENT_TYPES):
    """Create or refresh the given content types. Returns the number written."""
    count = 0
    for definition in definitions:
        content_type = ContentType.find_by_key(definition["key"])
        if not content_type:
            content_type = ContentType()
            db.session.add(content_type)

        for attr, value in definition.items():
            setattr(content_type, attr, value)
        count += 1

    db.session.commit()
    return count
