from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..i18n import Language, TranslationTable
from ..models.subscription import BillingCycle, SubscriptionPlan
from .api_client import AdminApiClient, ApiCall
from .form_service import FormModal, FormState


logger = logging.getLogger(__name__)


PLANS_PATH = "/api/subscription/plans"
CURRENT_SUBSCRIPTION_PATH = "/api/admin/subscription/current"
ACTIVATE_PATH = "/api/admin/subscription/activate"


SUBSCRIPTION_TRANSLATIONS: TranslationTable = {
    Language.EN: {
        "title": "Subscription",
        "saved": "Subscription activated successfully",
        "save_failed": "Failed to activate subscription",
        "plan_required": "Please select a plan",
    },
    Language.SW: {
        "title": "Usajili",
        "saved": "Usajili umewezeshwa kikamilifu",
        "save_failed": "Imeshindwa kuwezesha usajili",
        "plan_required": "Tafadhali chagua mpango",
    },
}


class SubscriptionError(Exception):
    """Raised when subscription data cannot be loaded."""


def list_plans(api: AdminApiClient) -> list[SubscriptionPlan]:
    response = api.get(PLANS_PATH)
    if not response.success:
        raise SubscriptionError(response.message or "Failed to load subscription plans")
    data = response.data
    # The plans endpoint returns either a bare list or {"plans": [...]}
    rows = data.get("plans") if isinstance(data, dict) else data
    return [SubscriptionPlan.from_api(row) for row in rows or []]


def current_subscription(api: AdminApiClient, business_id: int) -> Optional[dict]:
    response = api.get(CURRENT_SUBSCRIPTION_PATH, params={"businessId": business_id})
    if not response.success:
        raise SubscriptionError(response.message or "Failed to load subscription")
    data = response.data or {}
    return data.get("subscription") if "subscription" in data else (data or None)


def normalize_billing_cycle(value) -> BillingCycle:
    """YEARLY stays YEARLY; anything else is billed monthly."""
    if str(getattr(value, "value", value) or "").upper() == BillingCycle.YEARLY.value:
        return BillingCycle.YEARLY
    return BillingCycle.MONTHLY


@dataclass
class PlanActivationForm(FormState):
    plan_id: Optional[int] = None
    billing_cycle: BillingCycle = BillingCycle.MONTHLY


class PlanActivation(FormModal):
    translations = SUBSCRIPTION_TRANSLATIONS

    def __init__(self, api: AdminApiClient, notifications, *, business_id: int, **kwargs):
        self.business_id = business_id
        super().__init__(api, notifications, **kwargs)

    def empty_form(self) -> PlanActivationForm:
        return PlanActivationForm()

    def populate(self, plan: SubscriptionPlan) -> None:
        self.form.plan_id = plan.id

    def validate(self) -> dict[str, str]:
        if not self.form.plan_id:
            return {"plan_id": self.t("plan_required")}
        return {}

    def build_call(self) -> ApiCall:
        return ApiCall(
            "POST",
            ACTIVATE_PATH,
            json={
                "businessId": self.business_id,
                "planId": int(self.form.plan_id),
                "billingCycle": normalize_billing_cycle(self.form.billing_cycle).value,
            },
        )
