# Overview: Store transfer submission (store-to-store or out of the business).

from flask import Blueprint, current_app, g, request

from ..decorators import require_business, with_console
from ..extensions import admin_api
from ..models.transfers import DestinationType
from ..responses import bad_request, envelope, json_fields
from ..services import store_service, transfer_service
from ..services.api_client import ApiTransportError
from ..validation import ValidationError, parse_int


transfers_bp = Blueprint("transfers", __name__, url_prefix="/console/transfers")


def _optional_id(value, field):
    if value in (None, ""):
        return None
    return parse_int(value, field)


@transfers_bp.post("")
@with_console
@require_business
def create_transfer():
    """
    Move stock out of one store.

    Request body:
    {
        "from_store_id": int,
        "destination_type": "store" | "external",
        "to_store_id": int (destination_type=store),
        "external_destination": str (destination_type=external),
        "items": [{"product_id": int, "quantity": int, "reason": str (optional)}]
    }

    Quantities are checked against the source store's current stock, which
    is re-read before the transfer is sent.

    Returns:
        200: Transfer recorded
        400: Rejected before reaching the admin API (see "errors")
        502: Admin API failure
    """
    data = json_fields(request.get_json(silent=True))

    try:
        from_store_id = _optional_id(data.get("from_store_id"), "from_store_id")
        to_store_id = _optional_id(data.get("to_store_id"), "to_store_id")
        destination_type = DestinationType(data.get("destination_type") or DestinationType.STORE.value)
        quantities = {}
        reasons = {}
        rows = data.get("items") or []
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise ValidationError("items must be a list of objects")
        for row in rows:
            product_id = parse_int(row["product_id"], "product_id")
            quantities[product_id] = parse_int(row.get("quantity", 0), "quantity")
            if row.get("reason"):
                reasons[product_id] = str(row["reason"])
    except KeyError as e:
        return bad_request(f"Missing required field: {e}")
    except ValueError as e:
        # ValidationError is a ValueError; so is an unknown destination_type
        return bad_request(str(e))

    try:
        stores = store_service.list_stores(admin_api.client, g.business_id)
    except (store_service.StoreError, ApiTransportError) as e:
        current_app.logger.exception("Failed to list stores for business %s", g.business_id)
        return envelope(False, status=502, message=str(e))

    workflow = transfer_service.run_transfer(
        admin_api.client,
        g.console.notifications,
        business_id=g.business_id,
        stores=stores,
        from_store_id=from_store_id,
        destination_type=destination_type,
        to_store_id=to_store_id,
        external_destination=str(data.get("external_destination") or ""),
        quantities=quantities,
        reasons=reasons,
        language=g.language,
    )

    if workflow.succeeded:
        return envelope(True)
    if workflow.upstream_failed:
        return envelope(False, status=502, message=workflow.error)
    return envelope(False, status=400, errors={"transfer": workflow.error}, message=workflow.error)
