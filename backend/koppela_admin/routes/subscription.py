# Overview: Subscription plans, the business's current plan, and plan activation.

from flask import Blueprint, current_app, g, request

from ..decorators import require_business, with_console
from ..extensions import admin_api
from ..i18n import localized_name
from ..responses import envelope, json_fields, run_modal
from ..services import subscription_service
from ..services.api_client import ApiTransportError


subscription_bp = Blueprint("subscription", __name__, url_prefix="/console/subscription")


@subscription_bp.get("/plans")
@with_console
def list_plans():
    try:
        plans = subscription_service.list_plans(admin_api.client)
    except (subscription_service.SubscriptionError, ApiTransportError) as e:
        current_app.logger.exception("Failed to load subscription plans")
        return envelope(False, status=502, message=str(e), plans=[])
    return envelope(True, plans=[
        dict(plan.to_dict(), label=localized_name(plan.display_name, plan.display_name_swahili, g.language))
        for plan in plans
    ])


@subscription_bp.get("/current")
@with_console
@require_business
def current():
    try:
        subscription = subscription_service.current_subscription(admin_api.client, g.business_id)
    except (subscription_service.SubscriptionError, ApiTransportError) as e:
        current_app.logger.exception("Failed to load subscription for business %s", g.business_id)
        return envelope(False, status=502, message=str(e))
    return envelope(True, subscription=subscription)


@subscription_bp.post("/activate")
@with_console
@require_business
def activate():
    """
    Request body:
    {
        "plan_id": int,
        "billing_cycle": "MONTHLY" | "YEARLY" (anything else bills monthly)
    }
    """
    modal = subscription_service.PlanActivation(
        admin_api.client, g.console.notifications, business_id=g.business_id, language=g.language,
    )
    return run_modal(modal, json_fields(request.get_json(silent=True), exclude=("business_id",)))
