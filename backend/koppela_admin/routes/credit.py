# Overview: Credit sale payments and payment reminders.

from flask import Blueprint, current_app, g, request

from ..decorators import require_business, with_console
from ..extensions import admin_api
from ..responses import bad_request, envelope, json_fields, not_found, run_modal
from ..services import credit_service
from ..services.api_client import ApiTransportError
from ..validation import ValidationError, parse_int


credit_bp = Blueprint("credit", __name__, url_prefix="/console/credit")


def _load_sales():
    try:
        sales = credit_service.list_credit_sales(
            admin_api.client,
            g.business_id,
            limit=request.args.get("limit", 50, type=int),
            offset=request.args.get("offset", 0, type=int),
        )
        return sales, None
    except (credit_service.CreditError, ApiTransportError) as e:
        current_app.logger.exception("Failed to load credit sales for business %s", g.business_id)
        return None, envelope(False, status=502, message=str(e))


@credit_bp.get("/sales")
@with_console
@require_business
def list_sales():
    sales, failure = _load_sales()
    if failure is not None:
        return failure
    return envelope(True, sales=[
        {
            "id": s.id,
            "sale_number": s.sale_number,
            "customer_name": s.customer_name,
            "customer_phone": s.customer_phone,
            "total_amount": s.total_amount,
            "amount_paid": s.amount_paid,
            "outstanding_balance": s.outstanding_balance,
            "due_date": s.due_date,
        }
        for s in sales
    ])


def _find_sales(sale_ids):
    try:
        return credit_service.find_credit_sales(admin_api.client, g.business_id, sale_ids), None
    except (credit_service.CreditError, ApiTransportError) as e:
        current_app.logger.exception("Failed to load credit sales for business %s", g.business_id)
        return None, envelope(False, status=502, message=str(e))


@credit_bp.post("/sales/<int:sale_id>/payments")
@with_console
@require_business
def record_payment(sale_id: int):
    """
    Request body:
    {
        "amount": number (> 0, at most the outstanding balance),
        "payment_method": "CASH" | "MPESA" | "TIGOPESA" | "AIRTEL" | "BANK_TRANSFER" | "CARD",
        "reference": str, "notes": str
    }

    Returns:
        200: Payment recorded
        400: Amount missing, non-positive or above the balance
        404: No credit sale with that id
        502: Admin API failure
    """
    fields = json_fields(request.get_json(silent=True), exclude=("business_id",))
    found, failure = _find_sales([sale_id])
    if failure is not None:
        return failure
    sale = found.get(sale_id)
    if sale is None:
        return not_found("Credit sale not found")

    modal = credit_service.RecordPaymentModal(
        admin_api.client, g.console.notifications, business_id=g.business_id, language=g.language,
    )
    return run_modal(modal, fields, sale)


@credit_bp.post("/reminders")
@with_console
@require_business
def send_reminders():
    """
    Request body:
    {
        "sale_ids": [int, ...],
        "channel": "SMS" | "EMAIL" | "BOTH",
        "message": str (optional, defaults to the translated template),
        "business_name": str (optional)
    }

    The response carries "preview" when exactly one sale is selected.
    """
    data = json_fields(request.get_json(silent=True))
    sale_ids = data.get("sale_ids")
    if not isinstance(sale_ids, list) or not sale_ids:
        return bad_request("sale_ids must be a non-empty list", errors={"sales": "Nothing selected"})
    try:
        wanted = [parse_int(i, "sale_ids") for i in sale_ids]
    except ValidationError as e:
        return bad_request(str(e), errors={"sales": str(e)})

    found, failure = _find_sales(wanted)
    if failure is not None:
        return failure
    if any(sale_id not in found for sale_id in wanted):
        return not_found("Credit sale not found")
    selected = [found[sale_id] for sale_id in dict.fromkeys(wanted)]

    modal = credit_service.SendReminderModal(
        admin_api.client,
        g.console.notifications,
        business_id=g.business_id,
        business_name=data.get("business_name") or "Your Business",
        language=g.language,
    )
    modal.open(selected)
    preview = modal.preview
    fields = json_fields(data, exclude=("sale_ids", "business_name", "business_id"))
    if fields.get("message") is not None:
        modal.change(message=fields["message"])
        preview = modal.preview
    return run_modal(modal, fields, selected, preview=preview)
