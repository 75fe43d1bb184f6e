# Overview: Business member endpoints (list, add or invite, edit, remove).

from flask import Blueprint, current_app, g, request

from ..decorators import require_business, with_console
from ..extensions import admin_api
from ..models.users import AddUserMode, BusinessUser, UserRole
from ..responses import bad_request, envelope, json_fields, modal_result, not_found, run_modal
from ..services import user_service
from ..services.api_client import ApiTransportError


users_bp = Blueprint("users", __name__, url_prefix="/console/users")


@users_bp.get("")
@with_console
@require_business
def list_users():
    try:
        users = user_service.list_users(admin_api.client, g.business_id)
    except (user_service.UserError, ApiTransportError) as e:
        current_app.logger.exception("Failed to list users for business %s", g.business_id)
        return envelope(False, status=502, message=str(e), users=[])
    return envelope(True, users=[
        {
            "id": u.id,
            "full_name": u.full_name,
            "email": u.email,
            "phone": u.phone,
            "role": u.role.value,
            "is_active": u.is_active,
            "is_owner": u.is_owner,
        }
        for u in users
    ])


@users_bp.post("")
@with_console
@require_business
def add_user():
    """
    Request body:
    {
        "mode": "create" | "invite" (default "create"),
        "full_name": str, "email": str, "phone": str,
        "password": str, "confirm_password": str,
        "role": "ADMIN" | "MANAGER" | "CASHIER", "is_active": bool
    }
    """
    data = json_fields(request.get_json(silent=True))
    try:
        mode = AddUserMode(data.get("mode") or AddUserMode.CREATE.value)
    except ValueError:
        return bad_request("mode must be one of: create, invite")

    modal = user_service.AddUserModal(
        admin_api.client,
        g.console.notifications,
        business_id=g.business_id,
        language=g.language,
        mode=mode,
    )
    return run_modal(modal, json_fields(data, exclude=("mode", "business_id")))


@users_bp.put("/<int:user_id>")
@with_console
@require_business
def edit_user(user_id: int):
    """
    Request body: full_name, email, phone, role, is_active; with
    "change_password": true also password and confirm_password.
    Fields left out keep the member's stored values.

    Returns:
        200: User updated
        400: Validation failed
        404: Not a member of this business
        502: Admin API failure
    """
    data = json_fields(request.get_json(silent=True))
    fields = json_fields(data, exclude=("change_password", "business_id"))
    try:
        user = user_service.find_user(admin_api.client, g.business_id, user_id)
    except (user_service.UserError, ApiTransportError) as e:
        current_app.logger.exception("Failed to load user %s", user_id)
        return envelope(False, status=502, message=str(e))
    if user is None:
        return not_found("User not found")

    modal = user_service.EditUserModal(
        admin_api.client, g.console.notifications, business_id=g.business_id, language=g.language,
    )
    modal.open(user)
    modal.set_change_password(bool(data.get("change_password")))
    try:
        modal.change(**fields)
        ok = modal.submit()
    except ValueError as e:
        return bad_request(str(e))

    return modal_result(modal, ok)


@users_bp.delete("/<int:user_id>")
@with_console
@require_business
def delete_user(user_id: int):
    modal = user_service.DeleteUserModal(
        admin_api.client, g.console.notifications, business_id=g.business_id, language=g.language,
    )
    entity = BusinessUser(id=user_id, first_name="", last_name="", email="", role=UserRole.CASHIER)
    return run_modal(modal, None, entity)
