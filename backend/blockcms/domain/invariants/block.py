from blockcms.domain.exceptions import ValidationFailure
from blockcms.utils.slug import SLUG_FORMAT


def collect_block_errors(block, content_type):
    errors = {}

    def add(field, message):
        errors.setdefault(field, []).append(message)

    if not (block.name or "").strip():
        add("name", "can't be blank")

    if block.slug and not SLUG_FORMAT.match(block.slug):
        add("slug", "may only contain lowercase letters, digits and dashes")

    content = block.content or {}
    for field in content_type.required_fields or []:
        value = content.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            add(field, "can't be blank")

    allowed = set(content_type.fields or [])
    for field in content:
        if field not in allowed:
            add(field, "is not a field of this content type")

    if block.category_id and not content_type.supports_categories:
        add("category_id", "is not supported by this content type")

    if block.section_id and not content_type.can_have_parent:
        add("section_id", "is not supported by this content type")

    return errors


def assert_block(block, content_type):
    errors = collect_block_errors(block, content_type)
    if errors:
        raise ValidationFailure(errors)
