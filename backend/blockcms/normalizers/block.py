def _iso(value):
    return value.isoformat() if value is not None else None


def normalize_block(block, admin=False):
    """
    Works for both a stored ContentBlock (draft / working copy) and a
    BlockView snapshot of one of its versions.
    """
    if block is None:
        return None

    base = {
        "id": block.id,
        "content_type": block.content_type_key,
        "name": block.name,
        "slug": block.slug,
        "category_id": block.category_id,
        "section_id": block.section_id,
        "content": block.content or {},
        "published": bool(block.published),
    }

    if hasattr(block, "version"):
        base["version"] = block.version
        base["status"] = block.status
        base["reverted_from"] = block.reverted_from
    else:
        base["latest_version"] = block.latest_version
        base["lock_version"] = block.lock_version
        base["draft_version"] = block.draft_version

    if admin:
        base["created_at"] = _iso(getattr(block, "created_at", None))
        base["updated_at"] = _iso(getattr(block, "updated_at", None))
        base["created_by"] = getattr(block, "created_by", None)

    errors = getattr(block, "errors", None)
    if errors:
        base["errors"] = errors

    return base


def normalize_version(record):
    return {
        "id": record.id,
        "version": record.version,
        "status": record.status,
        "reverted_from": record.reverted_from,
        "name": (record.snapshot or {}).get("name"),
        "created_at": _iso(record.created_at),
        "created_by": record.created_by,
    }
