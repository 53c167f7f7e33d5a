def snapshot_block(block):
    return {
        "name": block.name,
        "slug": block.slug,
        "category_id": block.category_id,
        "section_id": block.section_id,
        "content": dict(block.content or {}),
    }

def restore_snapshot(block, snapshot):
    """Copy a version snapshot back onto the block's working copy."""
    block.name = snapshot["name"]
    block.slug = snapshot["slug"]
    block.category_id = snapshot.get("category_id")
    block.section_id = snapshot.get("section_id")
    block.content = dict(snapshot.get("content") or {})

def next_version(block_id):
    from blockcms.models.block_version import BlockVersion

    last = (
        BlockVersion.query
        .filter_by(block_id=block_id)
        .order_by(BlockVersion.version.desc())
        .first()
    )
    return (last.version + 1) if last else 1
