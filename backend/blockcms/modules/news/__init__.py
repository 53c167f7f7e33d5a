"""
News releases: a versioned, categorised content type with a dated
details page at /news_releases/<yyyy>/<mm>/<dd>/<slug>.
"""
from blockcms.domain.exceptions import ContentNotFound

NEWS_RELEASE = {
    "key": "news_release",
    "display_name": "News Release",
    "path": "news_releases",
    "supports_versioning": True,
    "connectable": True,
    "can_have_parent": True,
    "searchable": True,
    "supports_categories": True,
    "default_order": "-created_at",
    "fields": ["summary", "body", "release_date"],
    "required_fields": ["release_date"],
}


def find_news_release(store, content_type, year, month, day, slug):
    release = store.find_by_slug(content_type, slug)
    release_date = f"{year:04d}-{month:02d}-{day:02d}"

    if not release or (release.content or {}).get("release_date") != release_date:
        raise ContentNotFound(
            f"No Content at /{content_type.path}/{year:04d}/{month:02d}/{day:02d}/{slug}"
        )
    return release
