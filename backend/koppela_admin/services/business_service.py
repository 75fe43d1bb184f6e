# Overview: Business onboarding (plan + details wizard), business settings and logo upload.

"""
Business service.

Create flow (CreateBusinessWizard):
1. PLAN step: plans are fetched when the wizard opens; none is preselected,
   and the operator cannot advance without choosing one
2. DETAILS step: name, type, optional category and contact data; the slug
   follows the name until the operator edits it by hand
3. submit(): one POST; on a slug collision the slug field gets an inline
   error in addition to the error toast

The wizard cannot be dismissed from the backdrop until a business exists.
"""
from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Optional

from ..i18n import Language, TranslationTable, translate
from ..models.business import BusinessCategory, BusinessType
from ..models.subscription import SubscriptionPlan
from ..validation import ValidationError, is_valid_email, is_valid_phone, is_valid_website, parse_amount
from .api_client import AdminApiClient, ApiCall, ApiResponse, ApiTransportError
from .form_service import FormModal, FormState
from .subscription_service import SubscriptionError, list_plans


logger = logging.getLogger(__name__)


BUSINESS_PATH = "/api/admin/business"
CREATE_BUSINESS_PATH = "/api/admin/business/create"
UPLOAD_LOGO_PATH = "/api/admin/business/upload-logo"

SLUG_MAX_LENGTH = 50
SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")


BUSINESS_TRANSLATIONS: TranslationTable = {
    Language.EN: {
        "title": "Business",
        "created": "Business created successfully",
        "saved": "Business updated successfully",
        "save_failed": "Failed to update business",
        "create_failed": "Failed to create business",
        "load_failed": "Failed to load business data",
        "plans_failed": "Failed to load subscription plans",
        "plan_required": "Please select a plan to continue",
        "name_required": "Business name is required",
        "type_required": "Business type is required",
        "slug_required": "Slug is required",
        "slug_invalid": "Slug may contain only lowercase letters, numbers and dashes",
        "slug_exists": "This slug is already taken. Please choose another.",
        "invalid_email": "Invalid email format",
        "invalid_phone": "Invalid phone number",
        "invalid_website": "Invalid website URL",
        "invalid_number": "Please enter a valid number",
        "logo_uploaded": "Logo uploaded successfully",
        "logo_failed": "Failed to upload logo",
        "logo_not_image": "Only image files are allowed",
        "logo_too_large": "File size must be less than 5MB",
    },
    Language.SW: {
        "title": "Biashara",
        "created": "Biashara imeundwa kikamilifu",
        "saved": "Biashara imesasishwa kikamilifu",
        "save_failed": "Imeshindwa kusasisha biashara",
        "create_failed": "Imeshindwa kuunda biashara",
        "load_failed": "Imeshindwa kupakia taarifa za biashara",
        "plans_failed": "Imeshindwa kupakia mipango ya usajili",
        "plan_required": "Tafadhali chagua mpango ili kuendelea",
        "name_required": "Jina la biashara linahitajika",
        "type_required": "Aina ya biashara inahitajika",
        "slug_required": "Slug inahitajika",
        "slug_invalid": "Slug inaweza kuwa na herufi ndogo, namba na vistari tu",
        "slug_exists": "Slug hii tayari imetumika. Tafadhali chagua nyingine.",
        "invalid_email": "Muundo wa barua pepe si sahihi",
        "invalid_phone": "Nambari ya simu si sahihi",
        "invalid_website": "Anwani ya tovuti si sahihi",
        "invalid_number": "Tafadhali ingiza namba sahihi",
        "logo_uploaded": "Nembo imepakiwa kikamilifu",
        "logo_failed": "Imeshindwa kupakia nembo",
        "logo_not_image": "Faili za picha pekee zinaruhusiwa",
        "logo_too_large": "Ukubwa wa faili lazima uwe chini ya 5MB",
    },
}


def slugify(name: str) -> str:
    """
    URL-safe identifier derived from a business name.

    "Koppela Mini Mart!" -> "koppela-mini-mart"
    """
    slug = (name or "").strip().lower()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    return slug[:SLUG_MAX_LENGTH]


def is_slug_collision(message: Optional[str]) -> bool:
    lowered = (message or "").lower()
    return "slug" in lowered and "exists" in lowered


def _optional(value: str) -> Optional[str]:
    value = (value or "").strip()
    return value or None


class WizardStep(str, Enum):
    PLAN = "plan"
    DETAILS = "details"


@dataclass
class BusinessDetailsForm(FormState):
    plan_id: Optional[int] = None
    name: str = ""
    business_type: BusinessType = BusinessType.RETAIL
    business_category: Optional[BusinessCategory] = None
    slug: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    website: str = ""


class CreateBusinessWizard(FormModal):
    translations = BUSINESS_TRANSLATIONS
    success_key = "created"
    failure_key = "create_failed"

    def __init__(
        self,
        api: AdminApiClient,
        notifications,
        *,
        on_created: Optional[Callable[[Optional[int]], None]] = None,
        **kwargs,
    ):
        self.on_created = on_created
        self.step = WizardStep.PLAN
        self.plans: list[SubscriptionPlan] = []
        self.slug_manually_edited = False
        self.created_business_id: Optional[int] = None
        super().__init__(api, notifications, **kwargs)

    def empty_form(self) -> BusinessDetailsForm:
        return BusinessDetailsForm()

    def reset(self) -> None:
        super().reset()
        self.step = WizardStep.PLAN
        self.slug_manually_edited = False

    def open(self, entity: Any = None) -> None:
        super().open(entity)
        self.created_business_id = None
        self.load_plans()

    def load_plans(self) -> bool:
        try:
            self.plans = list_plans(self.api)
        except (SubscriptionError, ApiTransportError):
            logger.exception("Failed to load subscription plans")
            self.plans = []
            self.notifications.show_error(self.t("title"), self.t("plans_failed"))
            return False
        return True

    def select_plan(self, plan_id: int) -> None:
        self.change(plan_id=plan_id)

    def next_step(self) -> bool:
        if not self.form.plan_id:
            self.errors["plan_id"] = self.t("plan_required")
            return False
        self.step = WizardStep.DETAILS
        return True

    def previous_step(self) -> None:
        self.step = WizardStep.PLAN

    def dismiss(self) -> bool:
        """Backdrop click or Escape: ignored until the business has been created."""
        if self.is_open and self.created_business_id is None:
            return False
        self.close()
        return True

    def on_change(self, changes: dict[str, Any]) -> None:
        if "slug" in changes:
            self.slug_manually_edited = True
        elif "name" in changes and not self.slug_manually_edited:
            self.form.slug = slugify(self.form.name)
            self.errors.pop("slug", None)

    def validate(self) -> dict[str, str]:
        form = self.form
        errors = {}
        if not form.plan_id:
            errors["plan_id"] = self.t("plan_required")
        if not form.name.strip():
            errors["name"] = self.t("name_required")
        if not form.business_type:
            errors["business_type"] = self.t("type_required")
        slug = form.slug.strip()
        if not slug:
            errors["slug"] = self.t("slug_required")
        elif not SLUG_PATTERN.match(slug):
            errors["slug"] = self.t("slug_invalid")
        if form.email.strip() and not is_valid_email(form.email):
            errors["email"] = self.t("invalid_email")
        if form.phone.strip() and not is_valid_phone(form.phone):
            errors["phone"] = self.t("invalid_phone")
        if form.website.strip() and not is_valid_website(form.website):
            errors["website"] = self.t("invalid_website")
        return errors

    def build_call(self) -> ApiCall:
        form = self.form
        payload = {
            "name": form.name.strip(),
            "businessType": BusinessType(form.business_type).value,
            "businessCategory": BusinessCategory(form.business_category).value if form.business_category else None,
            "slug": form.slug.strip(),
            "email": _optional(form.email),
            "phone": _optional(form.phone),
            "address": _optional(form.address),
            "city": _optional(form.city),
            "website": _optional(form.website),
            "planId": int(form.plan_id),
        }
        return ApiCall("POST", CREATE_BUSINESS_PATH, json={k: v for k, v in payload.items() if v is not None})

    def on_failure(self, response: ApiResponse) -> None:
        if is_slug_collision(response.message):
            self.errors["slug"] = self.t("slug_exists")

    def after_success(self, data: Any) -> None:
        business = (data or {}).get("business") or {}
        self.created_business_id = business.get("id")
        if self.on_created is not None:
            self.on_created(self.created_business_id)


@dataclass
class BusinessSettings(FormState):
    name: str = ""
    business_type: str = ""
    description: str = ""
    email: str = ""
    phone: str = ""
    website: str = ""
    address: str = ""
    city: str = ""
    region: str = ""
    country: str = "Tanzania"
    postal_code: str = ""
    currency: str = "TZS"
    tax_rate: float = 18.0
    wholesale_margin: float = 30.0
    retail_margin: float = 50.0
    financial_year_start: str = "01-01"
    enable_inventory_tracking: bool = True
    enable_credit_sales: bool = False
    enable_loyalty_program: bool = False
    enable_tax_calculation: bool = True

    @classmethod
    def from_api(cls, business: dict) -> "BusinessSettings":
        defaults = cls()

        def pick(key: str, fallback):
            value = business.get(key)
            return fallback if value in (None, "") else value

        return cls(
            name=business.get("name") or "",
            business_type=business.get("businessType") or "",
            description=business.get("description") or "",
            email=business.get("email") or "",
            phone=business.get("phone") or "",
            website=business.get("website") or "",
            address=business.get("address") or "",
            city=business.get("city") or "",
            region=business.get("region") or "",
            country=pick("country", defaults.country),
            postal_code=business.get("postalCode") or "",
            currency=pick("currency", defaults.currency),
            tax_rate=float(pick("taxRate", defaults.tax_rate)),
            wholesale_margin=float(pick("wholesaleMargin", defaults.wholesale_margin)),
            retail_margin=float(pick("retailMargin", defaults.retail_margin)),
            financial_year_start=pick("financialYearStart", defaults.financial_year_start),
            enable_inventory_tracking=bool(pick("enableInventoryTracking", True)),
            enable_credit_sales=bool(pick("enableCreditSales", False)),
            enable_loyalty_program=bool(pick("enableLoyaltyProgram", False)),
            enable_tax_calculation=bool(pick("enableTaxCalculation", True)),
        )

    def to_payload(self) -> dict:
        camel = {}
        for key, value in asdict(self).items():
            head, *rest = key.split("_")
            camel[head + "".join(part.title() for part in rest)] = value
        return camel


class BusinessSettingsForm(FormModal):
    """Edit screen for the current business; loads, then saves the whole settings object."""

    translations = BUSINESS_TRANSLATIONS
    close_on_success = False
    numeric_fields = ("tax_rate", "wholesale_margin", "retail_margin")

    def __init__(self, api: AdminApiClient, notifications, *, business_id: int, **kwargs):
        self.business_id = business_id
        self.is_loading = False
        super().__init__(api, notifications, **kwargs)

    def empty_form(self) -> BusinessSettings:
        return BusinessSettings()

    def load(self) -> bool:
        self.open()
        self.is_loading = True
        try:
            response = self.api.get(BUSINESS_PATH, params={"businessId": self.business_id})
        except ApiTransportError:
            logger.exception("Failed to load business %s", self.business_id)
            self.notifications.show_error(self.t("title"), self.t("load_failed"))
            return False
        finally:
            self.is_loading = False

        business = (response.data or {}).get("business") if response.success else None
        if not business:
            self.notifications.show_error(self.t("title"), response.message or self.t("load_failed"))
            return False
        self.form = BusinessSettings.from_api(business)
        return True

    def validate(self) -> dict[str, str]:
        form = self.form
        errors = {}
        if not form.name.strip():
            errors["name"] = self.t("name_required")
        if form.email.strip() and not is_valid_email(form.email):
            errors["email"] = self.t("invalid_email")
        if form.website.strip() and not is_valid_website(form.website):
            errors["website"] = self.t("invalid_website")
        for name in self.numeric_fields:
            try:
                value = parse_amount(getattr(form, name), name)
            except ValidationError:
                errors[name] = self.t("invalid_number")
                continue
            if value < 0:
                errors[name] = self.t("invalid_number")
        return errors

    def build_call(self) -> ApiCall:
        payload = {"businessId": self.business_id}
        payload.update(self.form.to_payload())
        payload["taxRate"] = parse_amount(self.form.tax_rate, "tax_rate")
        payload["wholesaleMargin"] = parse_amount(self.form.wholesale_margin, "wholesale_margin")
        payload["retailMargin"] = parse_amount(self.form.retail_margin, "retail_margin")
        return ApiCall("PUT", BUSINESS_PATH, json=payload)


class LogoUpload:
    """Business logo: content type and size are checked before anything is uploaded."""

    def __init__(
        self,
        api: AdminApiClient,
        notifications,
        *,
        business_id: int,
        max_bytes: int = 5 * 1024 * 1024,
        language: Language = Language.EN,
    ):
        self.api = api
        self.notifications = notifications
        self.business_id = business_id
        self.max_bytes = max_bytes
        self.language = language
        self.is_uploading = False
        self.logo_url: Optional[str] = None

    def t(self, key: str) -> str:
        return translate(BUSINESS_TRANSLATIONS, self.language, key)

    def check(self, content_type: Optional[str], size: int) -> Optional[str]:
        if not (content_type or "").startswith("image/"):
            return self.t("logo_not_image")
        if size > self.max_bytes:
            return self.t("logo_too_large")
        return None

    def upload(self, filename: str, content: bytes, content_type: Optional[str]) -> bool:
        if self.is_uploading:
            return False

        problem = self.check(content_type, len(content))
        if problem:
            logger.info("Logo upload rejected for business %s: %s", self.business_id, problem)
            self.notifications.show_error(self.t("title"), problem)
            return False

        call = ApiCall(
            "POST",
            UPLOAD_LOGO_PATH,
            data={"businessId": str(self.business_id)},
            files={"file": (filename, content, content_type)},
        )
        self.is_uploading = True
        try:
            response = self.api.send(call)
        except ApiTransportError:
            logger.exception("Logo upload failed for business %s", self.business_id)
            self.notifications.show_error(self.t("title"), self.t("logo_failed"))
            return False
        finally:
            self.is_uploading = False

        if not response.success:
            self.notifications.show_error(self.t("title"), response.message or self.t("logo_failed"))
            return False

        self.logo_url = (response.data or {}).get("logoUrl")
        self.notifications.show_success(self.t("title"), self.t("logo_uploaded"))
        return True
