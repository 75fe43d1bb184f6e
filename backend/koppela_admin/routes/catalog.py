# Overview: Leasable services and their items (rooms, vehicles, equipment).

from flask import Blueprint, current_app, g, request

from ..decorators import require_business, with_console
from ..extensions import admin_api
from ..responses import envelope, json_fields, not_found, run_modal
from ..services import catalog_service
from ..services.api_client import ApiTransportError


catalog_bp = Blueprint("catalog", __name__, url_prefix="/console/services")


def _body():
    return json_fields(request.get_json(silent=True), exclude=("business_id",))


@catalog_bp.post("")
@with_console
@require_business
def add_service():
    """
    Request body:
    {
        "name": str, "name_swahili": str, "description": str,
        "service_type": "LEASE"
    }
    """
    modal = catalog_service.AddServiceModal(
        admin_api.client, g.console.notifications, business_id=g.business_id, language=g.language,
    )
    return run_modal(modal, _body())


@catalog_bp.put("/<int:service_id>")
@with_console
@require_business
def edit_service(service_id: int):
    """
    Fields left out keep the service's stored values.

    Returns:
        200: Service updated
        400: Validation failed
        404: No such service in this business
        502: Admin API failure
    """
    fields = _body()
    try:
        service = catalog_service.find_service(admin_api.client, g.business_id, service_id)
    except (catalog_service.CatalogError, ApiTransportError) as e:
        current_app.logger.exception("Failed to load service %s", service_id)
        return envelope(False, status=502, message=str(e))
    if service is None:
        return not_found("Service not found")

    modal = catalog_service.EditServiceModal(
        admin_api.client, g.console.notifications, business_id=g.business_id, language=g.language,
    )
    return run_modal(modal, fields, service)


@catalog_bp.delete("/<int:service_id>")
@with_console
@require_business
def delete_service(service_id: int):
    modal = catalog_service.DeleteServiceModal(admin_api.client, g.console.notifications, language=g.language)
    return run_modal(modal, None, {"id": service_id})


@catalog_bp.post("/<int:service_id>/items")
@with_console
@require_business
def add_service_item(service_id: int):
    """
    Request body:
    {
        "item_number": str, "name": str, "name_swahili": str, "description": str,
        "price": number, "duration_value": int,
        "duration_unit": "MINUTES" | "HOURS" | "DAYS" | "WEEKS" | "MONTHS" | "YEARS",
        "status": "AVAILABLE" | "RENTED" | "BOOKED" | "MAINTENANCE"
    }
    """
    modal = catalog_service.AddServiceItemModal(
        admin_api.client, g.console.notifications, service_id=service_id, language=g.language,
    )
    return run_modal(modal, _body())


@catalog_bp.put("/<int:service_id>/items/<int:item_id>")
@with_console
@require_business
def edit_service_item(service_id: int, item_id: int):
    fields = _body()
    try:
        item = catalog_service.find_service_item(admin_api.client, service_id, item_id)
    except (catalog_service.CatalogError, ApiTransportError) as e:
        current_app.logger.exception("Failed to load item %s of service %s", item_id, service_id)
        return envelope(False, status=502, message=str(e))
    if item is None:
        return not_found("Service item not found")

    modal = catalog_service.EditServiceItemModal(
        admin_api.client, g.console.notifications, service_id=service_id, language=g.language,
    )
    return run_modal(modal, fields, item)


@catalog_bp.delete("/<int:service_id>/items/<int:item_id>")
@with_console
@require_business
def delete_service_item(service_id: int, item_id: int):
    modal = catalog_service.DeleteServiceItemModal(
        admin_api.client, g.console.notifications, service_id=service_id, language=g.language,
    )
    return run_modal(modal, None, {"id": item_id})
