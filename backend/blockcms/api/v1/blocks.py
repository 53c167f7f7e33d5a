# blockcms/api/v1/blocks.py
from flask import g, request

from blockcms.api.responses import respond
from blockcms.application.cms.block_controller import BlockLifecycleController
from blockcms.utils.decorators import cms_access_required
from . import v1_bp


def _body():
    return request.get_json(silent=True) or {}


def _redirect_to():
    return _body().get("_redirect_to") or request.args.get("_redirect_to")


def _controller(type_key):
    return BlockLifecycleController.for_type(type_key)


# ------------------------
# Content library
# ------------------------

@v1_bp.route("/content/<type_key>", methods=["GET"])
@cms_access_required
def list_blocks(type_key):
    return respond(_controller(type_key).index(
        g.current_user,
        section_id=request.args.get("section_id"),
        search=request.args.get("search"),
        order=request.args.get("order"),
        page=request.args.get("page", 1, type=int),
    ))


@v1_bp.route("/content/<type_key>/new", methods=["GET"])
@cms_access_required
def new_block(type_key):
    return respond(_controller(type_key).new(
        g.current_user,
        parent_id=request.args.get("parent"),
    ))


@v1_bp.route("/content/<type_key>", methods=["POST"])
@cms_access_required
def create_block(type_key):
    data = _body()

    return respond(_controller(type_key).create(
        g.current_user,
        data.get("block") or {},
        parent_id=data.get("parent"),
        redirect_to=_redirect_to(),
        connect_to_page_id=data.get("connect_to_page_id"),
        connect_to_container=data.get("connect_to_container"),
    ))


@v1_bp.route("/content/<type_key>/<block_id>", methods=["GET"])
@cms_access_required
def show_block(type_key, block_id):
    return respond(_controller(type_key).show(g.current_user, block_id))


@v1_bp.route("/content/<type_key>/<block_id>/edit", methods=["GET"])
@cms_access_required
def edit_block(type_key, block_id):
    return respond(_controller(type_key).edit(g.current_user, block_id))


@v1_bp.route("/content/<type_key>/<block_id>", methods=["PUT"])
@cms_access_required
def update_block(type_key, block_id):
    return respond(_controller(type_key).update(
        g.current_user,
        block_id,
        _body().get("block") or {},
        redirect_to=_redirect_to(),
        if_unmodified_since=request.headers.get("If-Unmodified-Since"),
    ))


@v1_bp.route("/content/<type_key>/<block_id>", methods=["DELETE"])
@cms_access_required
def destroy_block(type_key, block_id):
    return respond(_controller(type_key).destroy(
        g.current_user,
        block_id,
        redirect_to=_redirect_to(),
    ))


# ------------------------
# Versions & publishing
# ------------------------

@v1_bp.route("/content/<type_key>/<block_id>/publish", methods=["PUT"])
@cms_access_required
def publish_block(type_key, block_id):
    return respond(_controller(type_key).publish(
        g.current_user,
        block_id,
        redirect_to=_redirect_to(),
    ))


@v1_bp.route("/content/<type_key>/<block_id>/revert_to/<int:version>", methods=["PUT"])
@cms_access_required
def revert_block(type_key, block_id, version):
    return respond(_controller(type_key).revert_to(
        g.current_user,
        block_id,
        version,
        redirect_to=_redirect_to(),
    ))


@v1_bp.route("/content/<type_key>/<block_id>/version/<int:version>", methods=["GET"])
@cms_access_required
def block_version(type_key, block_id, version):
    return respond(_controller(type_key).version(g.current_user, block_id, version))


@v1_bp.route("/content/<type_key>/<block_id>/versions", methods=["GET"])
@cms_access_required
def block_versions(type_key, block_id):
    return respond(_controller(type_key).versions(g.current_user, block_id))


@v1_bp.route("/content/<type_key>/<block_id>/usages", methods=["GET"])
@cms_access_required
def block_usages(type_key, block_id):
    return respond(_controller(type_key).usages(g.current_user, block_id))
