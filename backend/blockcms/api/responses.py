# blockcms/api/responses.py
from flask import jsonify

from blockcms.normalizers.block import normalize_block, normalize_version
from blockcms.normalizers.page import normalize_page, normalize_section
from blockcms.normalizers.pagination import normalize_pagination


def _normalize_value(key, value):
    if key == "blocks":
        return normalize_pagination(value, lambda b: normalize_block(b, admin=True))
    if key in ("block", "other_version", "page"):
        return normalize_block(value, admin=True)
    if key == "versions":
        return [normalize_version(v) for v in value]
    if key == "pages":
        return [normalize_page(p) for p in value]
    if key == "parent":
        return normalize_section(value)
    return value


def respond(result):
    """Turns a controller ActionResult into a JSON response."""
    if result.kind == "redirect":
        response = jsonify({"redirect_to": result.location, **result.flash})
        response.status_code = result.status
        response.headers["Location"] = result.location
        return response

    if result.kind == "text":
        return result.body, result.status, {"Content-Type": "text/plain; charset=utf-8"}

    payload = {
        "view": result.view,
        "toolbar_tab": result.toolbar_tab,
    }
    if result.layout:
        payload["layout"] = result.layout

    for key, value in result.data.items():
        payload[key] = _normalize_value(key, value)

    return jsonify(payload), result.status
