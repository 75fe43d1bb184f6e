# Overview: Stock adjustment (write-off) endpoint.

from flask import Blueprint, current_app, g, request

from ..decorators import require_business, with_console
from ..extensions import admin_api
from ..responses import envelope, json_fields, run_modal
from ..services import stock_adjustment_service
from ..services.api_client import ApiTransportError


stock_adjustments_bp = Blueprint("stock_adjustments", __name__, url_prefix="/console/products")


@stock_adjustments_bp.post("/<int:product_id>/adjustments")
@with_console
@require_business
def create_adjustment(product_id: int):
    """
    Write stock off a product.

    Request body:
    {
        "adjustment_type": "DAMAGE" | "EXPIRED" | ... ,
        "quantity": int, "unit_cost": number (defaults to the cost price),
        "store_id": int (defaults to the first stocked store),
        "reason": str, "notes": str, "reference_number": str,
        "adjustment_date": "YYYY-MM-DD" (defaults to today)
    }

    Returns:
        200: Adjustment recorded; "total_cost" echoes quantity x unit cost
        400: Validation errors (quantity above on-hand stock, missing reason)
        502: Admin API failure
    """
    try:
        product = stock_adjustment_service.load_product(admin_api.client, product_id)
    except (stock_adjustment_service.StockAdjustmentError, ApiTransportError) as e:
        current_app.logger.exception("Failed to load product %s", product_id)
        return envelope(False, status=502, message=str(e))

    modal = stock_adjustment_service.StockAdjustmentModal(
        admin_api.client, g.console.notifications, business_id=g.business_id, language=g.language,
    )
    fields = json_fields(request.get_json(silent=True), exclude=("business_id",))
    total_cost = _total_cost(modal, product, fields)
    return run_modal(modal, fields, product, total_cost=total_cost, current_stock=product.on_hand)


def _total_cost(modal, product, fields) -> float:
    modal.open(product)
    try:
        modal.change(**fields)
    except ValueError:
        return 0.0
    return modal.total_cost
