# Overview: Store listing, store inventory and store CRUD for the current business.

from flask import Blueprint, current_app, g, request

from ..decorators import require_business, with_console
from ..extensions import admin_api
from ..models.stores import Store, StoreType
from ..responses import envelope, json_fields, not_found, run_modal
from ..services import store_service
from ..services.api_client import ApiTransportError


stores_bp = Blueprint("stores", __name__, url_prefix="/console/stores")


def _modal_kwargs():
    return {
        "business_id": g.business_id,
        "language": g.language,
    }


@stores_bp.get("")
@with_console
@require_business
def list_stores():
    """
    Query params:
        include_inactive: "true" to include deactivated stores

    Returns:
        200: {"stores": [...]}
        502: admin API failure
    """
    include_inactive = request.args.get("include_inactive", "").lower() == "true"
    try:
        stores = store_service.list_stores(admin_api.client, g.business_id, include_inactive=include_inactive)
    except (store_service.StoreError, ApiTransportError) as e:
        current_app.logger.exception("Failed to list stores for business %s", g.business_id)
        return envelope(False, status=502, message=str(e), stores=[])
    return envelope(True, stores=[s.to_dict() for s in stores])


@stores_bp.get("/<int:store_id>/inventory")
@with_console
@require_business
def store_inventory(store_id: int):
    try:
        items = store_service.load_inventory(admin_api.client, g.business_id, store_id)
    except (store_service.StoreError, ApiTransportError) as e:
        current_app.logger.exception("Failed to load inventory for store %s", store_id)
        return envelope(False, status=502, message=str(e), inventory=[])
    return envelope(True, inventory=[i.to_dict() for i in items])


@stores_bp.post("")
@with_console
@require_business
def add_store():
    """
    Request body (snake_case form fields):
    {
        "name": str,
        "name_swahili": str, "store_type": "main_store" | "retail_store" | "warehouse",
        "address": str, "city": str, "region": str, "phone": str, "email": str,
        "manager_id": int
    }
    """
    modal = store_service.AddStoreModal(admin_api.client, g.console.notifications, **_modal_kwargs())
    return run_modal(modal, json_fields(request.get_json(silent=True), exclude=("business_id",)))


@stores_bp.put("/<int:store_id>")
@with_console
@require_business
def edit_store(store_id: int):
    """
    Request body: any of the add_store fields; fields left out keep their stored values.

    Returns:
        200: Store updated
        400: Validation failed
        404: No such store
        502: Admin API failure
    """
    fields = json_fields(request.get_json(silent=True), exclude=("business_id",))
    try:
        store = store_service.find_store(admin_api.client, g.business_id, store_id)
    except (store_service.StoreError, ApiTransportError) as e:
        current_app.logger.exception("Failed to load store %s", store_id)
        return envelope(False, status=502, message=str(e))
    if store is None:
        return not_found("Store not found")

    modal = store_service.EditStoreModal(admin_api.client, g.console.notifications, **_modal_kwargs())
    return run_modal(modal, fields, store)


@stores_bp.delete("/<int:store_id>")
@with_console
@require_business
def delete_store(store_id: int):
    modal = store_service.DeleteStoreModal(admin_api.client, g.console.notifications, **_modal_kwargs())
    entity = Store(id=store_id, name="", store_type=StoreType.RETAIL_STORE)
    return run_modal(modal, None, entity)
