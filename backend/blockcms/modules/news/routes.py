from flask import g

from blockcms.api.responses import respond
from blockcms.application.cms.block_controller import BlockLifecycleController
from . import NEWS_RELEASE, find_news_release


def news_release_details(year, month, day, slug):
    controller = BlockLifecycleController.for_type(NEWS_RELEASE["key"])
    release = find_news_release(
        controller.store, controller.content_type, year, month, day, slug
    )
    return respond(controller.view_as_page(g.current_user, release.slug, view_mode=True))


def routes_for_news_module(bp):
    bp.add_url_rule(
        "/news_releases/<int(min=1000):year>/<int(fixed_digits=2):month>"
        "/<int(fixed_digits=2):day>/<slug>",
        endpoint="news_release_details",
        view_func=news_release_details,
        methods=["GET"],
    )
