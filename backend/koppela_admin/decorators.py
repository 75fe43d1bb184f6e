# Overview: Request decorators establishing console-session and business context for routes.

from functools import wraps

from flask import current_app, g, jsonify, request, session

from .extensions import console_sessions
from .i18n import Language, coerce_language, resolve_language


def _default_language() -> Language:
    return coerce_language(current_app.config.get("DEFAULT_LANGUAGE"), Language.EN)


def load_console():
    """
    Return the ConsoleSession of the current browser session, creating it once.

    The first request of a session picks the language from the saved
    preference or the browser's Accept-Language.
    """
    console = console_sessions.get(session.get("console_id"))
    if console is None:
        language = resolve_language(
            session.get("language"),
            request.headers.get("Accept-Language"),
            _default_language(),
        )
        console = console_sessions.create(language)
        session["console_id"] = console.id
    return console


def with_console(f):
    """
    Attach the caller's console state to the request.

    Sets the following Flask g attributes:
    - g.console: the ConsoleSession (notifications, navigation, language)
    - g.language: the console language for translated messages
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.console = load_console()
        g.language = g.console.language
        return f(*args, **kwargs)

    return decorated_function


def _requested_business_id():
    raw = request.headers.get("X-Business-Id") or request.args.get("businessId")
    if raw is None and request.is_json:
        body = request.get_json(silent=True)
        if isinstance(body, dict):
            raw = body.get("business_id")
    if raw is None:
        raw = session.get("business_id")
    return raw


def require_business(f):
    """
    Require a business context.

    MULTI-TENANT: Every admin API call is scoped to one business. The id comes
    from the X-Business-Id header, the businessId query parameter, a
    business_id JSON field, or the business last selected in this session.
    Sets g.business_id; returns 400 when none is available.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        raw = _requested_business_id()
        try:
            business_id = int(raw)
        except (TypeError, ValueError):
            return jsonify({"success": False, "message": "Business ID is required", "errors": {}, "toasts": []}), 400
        if business_id <= 0:
            return jsonify({"success": False, "message": "Business ID is required", "errors": {}, "toasts": []}), 400

        g.business_id = business_id
        session["business_id"] = business_id
        return f(*args, **kwargs)

    return decorated_function
