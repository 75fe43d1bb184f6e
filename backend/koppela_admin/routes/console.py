# Overview: Console preferences (language) and navigation progress endpoints.

from flask import Blueprint, g, jsonify, request, session

from ..decorators import with_console
from ..i18n import Language
from ..responses import bad_request, json_fields


console_bp = Blueprint("console", __name__, url_prefix="/console")


@console_bp.get("/language")
@with_console
def get_language():
    return jsonify({"language": g.console.language.value})


@console_bp.post("/language")
@with_console
def set_language():
    """
    Request body:
    {
        "language": "en" | "sw"
    }
    """
    data = json_fields(request.get_json(silent=True))
    try:
        language = Language(str(data.get("language", "")).lower())
    except ValueError:
        return bad_request("language must be one of: en, sw")

    g.console.set_language(language)
    session["language"] = language.value
    return jsonify({"language": language.value})


@console_bp.get("/navigation")
@with_console
def navigation_state():
    return jsonify(g.console.navigation.snapshot().to_dict())


@console_bp.post("/navigation")
@with_console
def navigation_start():
    """
    A link was clicked.

    Request body:
    {
        "href": str,
        "from_path": str (optional)
    }
    """
    data = json_fields(request.get_json(silent=True))
    g.console.navigation.start(data.get("href"), from_path=data.get("from_path"))
    return jsonify(g.console.navigation.snapshot().to_dict())


@console_bp.post("/navigation/arrived")
@with_console
def navigation_arrived():
    """The route changed; the bar completes shortly after."""
    data = json_fields(request.get_json(silent=True))
    g.console.navigation.route_changed(data.get("path"))
    return jsonify(g.console.navigation.snapshot().to_dict())


@console_bp.post("/navigation/stop")
@with_console
def navigation_stop():
    g.console.navigation.stop()
    return jsonify(g.console.navigation.snapshot().to_dict())
