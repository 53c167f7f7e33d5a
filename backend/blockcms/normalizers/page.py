def normalize_page(page):
    return {
        "id": page.id,
        "name": page.name,
        "path": page.path,
        "section_id": page.section_id,
    }


def normalize_section(section):
    if section is None:
        return None

    return {
        "id": section.id,
        "name": section.name,
        "path": section.path,
        "parent_id": section.parent_id,
    }
