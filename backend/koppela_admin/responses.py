# Overview: JSON envelope shared by every console route.

"""
Console responses.

Every route answers with:
    {"success": bool, "errors": {field: message}, "message": str|None,
     "toasts": [...], **extra}

Status codes:
- 200: the operation succeeded
- 400: the console rejected the input before calling the admin API
- 502: the admin API refused the request or could not be reached
"""
from typing import Any, Optional

from flask import g, jsonify

from .services.form_service import FormModal
from .validation import ValidationError


def _toasts() -> list:
    console = g.get("console")
    if console is None:
        return []
    return [toast.to_dict() for toast in console.notifications.toasts]


def envelope(
    success: bool,
    *,
    status: Optional[int] = None,
    errors: Optional[dict] = None,
    message: Optional[str] = None,
    **extra: Any,
):
    body = {
        "success": success,
        "errors": dict(errors or {}),
        "message": message,
        "toasts": _toasts(),
    }
    body.update(extra)
    if status is None:
        status = 200 if success else (400 if errors else 502)
    return jsonify(body), status


def bad_request(message: str, errors: Optional[dict] = None):
    return envelope(False, status=400, errors=errors, message=message)


def modal_result(modal: FormModal, ok: bool, **extra: Any):
    if ok:
        return envelope(True, **extra)
    if modal.upstream_failed:
        # Field errors may still be present, e.g. a slug the admin API reported as taken
        return envelope(False, status=502, errors=modal.errors, message=modal.failure_message, **extra)
    return envelope(False, status=400, errors=modal.errors, **extra)


def run_modal(modal: FormModal, fields: Optional[dict], entity: Any = None, **extra: Any):
    """open -> change(**fields) -> submit, rendered as a console response."""
    modal.open(entity)
    try:
        if fields:
            modal.change(**fields)
        ok = modal.submit()
    except ValidationError as exc:
        return bad_request(str(exc))
    except ValueError as exc:
        # Enum coercion of a field value the modal does not know
        return bad_request(f"Invalid value: {exc}")
    return modal_result(modal, ok, **extra)


def not_found(message: str):
    return envelope(False, status=404, message=message)


def json_fields(payload: Any, *, exclude: tuple = ()) -> dict:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return {k: v for k, v in payload.items() if k not in exclude}
