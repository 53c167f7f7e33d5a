# blockcms/api/public.py
from flask import Blueprint, g, request

from blockcms.api.responses import respond
from blockcms.application.cms.block_controller import BlockLifecycleController
from blockcms.domain.exceptions import ContentNotFound
from blockcms.models.content_type import ContentType
from blockcms.modules.news.routes import routes_for_news_module

# Public site: blocks rendered as standalone pages, no login required
public_bp = Blueprint("public", __name__)

routes_for_news_module(public_bp)


@public_bp.route("/<content_path>/<slug>", methods=["GET"])
def view_as_page(content_path, slug):
    content_type = ContentType.find_by_path(content_path)
    if not content_type:
        raise ContentNotFound(f"No Content at /{content_path}/{slug}")

    controller = BlockLifecycleController(content_type)

    # ?edit=true is the framed request from the block editor: plain page view
    return respond(controller.view_as_page(
        g.current_user,
        slug,
        view_mode=request.args.get("edit") == "true",
    ))
