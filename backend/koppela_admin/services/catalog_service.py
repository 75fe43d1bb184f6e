from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..i18n import Language, TranslationTable
from ..models.catalog import DurationUnit, ServiceItemStatus, ServiceType
from ..validation import ValidationError, parse_amount, parse_int
from .api_client import AdminApiClient, ApiCall
from .form_service import ConfirmDeleteModal, FormModal, FormState


SERVICES_PATH = "/api/admin/services"


CATALOG_TRANSLATIONS: TranslationTable = {
    Language.EN: {
        "title": "Services",
        "created": "Service has been created successfully.",
        "updated": "Service has been updated successfully.",
        "deleted": "Service has been deleted successfully.",
        "item_created": "Item has been added successfully.",
        "item_updated": "Item has been updated successfully.",
        "item_deleted": "Item has been deleted successfully.",
        "save_failed": "Failed to save service",
        "delete_failed": "Failed to delete",
        "name_required": "Service name is required",
        "item_number_required": "Item number is required",
        "item_name_required": "Item name is required",
        "price_invalid": "Price must be greater than zero",
        "duration_invalid": "Duration must be a whole number greater than zero",
    },
    Language.SW: {
        "title": "Huduma",
        "created": "Huduma imeundwa kwa mafanikio.",
        "updated": "Huduma imesasishwa kwa mafanikio.",
        "deleted": "Huduma imefutwa kwa mafanikio.",
        "item_created": "Kitu kimeongezwa kwa mafanikio.",
        "item_updated": "Kitu kimesasishwa kwa mafanikio.",
        "item_deleted": "Kitu kimefutwa kwa mafanikio.",
        "save_failed": "Imeshindwa kuhifadhi huduma",
        "delete_failed": "Imeshindwa kufuta",
        "name_required": "Jina la huduma linahitajika",
        "item_number_required": "Namba ya kitu inahitajika",
        "item_name_required": "Jina la kitu linahitajika",
        "price_invalid": "Bei lazima iwe zaidi ya sifuri",
        "duration_invalid": "Muda lazima uwe namba kamili zaidi ya sifuri",
    },
}


def _optional(value: str) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def _attr(entity: Any, name: str, default=None):
    """Read a field from an API dict (camelCase) or an object (snake_case)."""
    if isinstance(entity, dict):
        camel = name.split("_")[0] + "".join(p.title() for p in name.split("_")[1:])
        return entity.get(camel, default)
    return getattr(entity, name, default)


# ----------------------------------------------------------------------
# Services
# ----------------------------------------------------------------------


@dataclass
class ServiceForm(FormState):
    service_type: ServiceType = ServiceType.LEASE
    name: str = ""
    name_swahili: str = ""
    description: str = ""


class _ServiceModal(FormModal):
    translations = CATALOG_TRANSLATIONS

    def __init__(self, api: AdminApiClient, notifications, *, business_id: int, **kwargs):
        self.business_id = business_id
        super().__init__(api, notifications, **kwargs)

    def empty_form(self) -> ServiceForm:
        return ServiceForm()

    def validate(self) -> dict[str, str]:
        if not self.form.name.strip():
            return {"name": self.t("name_required")}
        return {}

    def payload(self) -> dict:
        return {
            "businessId": self.business_id,
            "serviceType": ServiceType(self.form.service_type).value,
            "name": self.form.name.strip(),
            "nameSwahili": _optional(self.form.name_swahili),
            "description": _optional(self.form.description),
        }


class AddServiceModal(_ServiceModal):
    success_key = "created"

    def build_call(self) -> ApiCall:
        return ApiCall("POST", SERVICES_PATH, json=self.payload())


class EditServiceModal(_ServiceModal):
    success_key = "updated"

    def __init__(self, *args, **kwargs):
        self.service_id: Optional[int] = None
        super().__init__(*args, **kwargs)

    def reset(self) -> None:
        super().reset()
        self.service_id = None

    def populate(self, service) -> None:
        self.service_id = int(_attr(service, "id"))
        self.form = ServiceForm(
            service_type=ServiceType(_attr(service, "service_type") or ServiceType.LEASE.value),
            name=_attr(service, "name") or "",
            name_swahili=_attr(service, "name_swahili") or "",
            description=_attr(service, "description") or "",
        )

    def validate(self) -> dict[str, str]:
        errors = super().validate()
        if self.service_id is None:
            errors["service"] = self.t("nothing_selected")
        return errors

    def build_call(self) -> ApiCall:
        payload = self.payload()
        payload.pop("businessId")
        return ApiCall("PUT", f"{SERVICES_PATH}/{self.service_id}", json=payload)


class DeleteServiceModal(ConfirmDeleteModal):
    translations = CATALOG_TRANSLATIONS

    def build_call(self) -> ApiCall:
        return ApiCall("DELETE", f"{SERVICES_PATH}/{_attr(self.entity, 'id')}")


# ----------------------------------------------------------------------
# Service items (the individual leasable units)
# ----------------------------------------------------------------------


@dataclass
class ServiceItemForm(FormState):
    item_number: str = ""
    name: str = ""
    name_swahili: str = ""
    description: str = ""
    price: str = ""
    duration_value: str = "1"
    duration_unit: DurationUnit = DurationUnit.DAYS
    status: ServiceItemStatus = ServiceItemStatus.AVAILABLE


class _ServiceItemModal(FormModal):
    translations = CATALOG_TRANSLATIONS

    def __init__(self, api: AdminApiClient, notifications, *, service_id: int, **kwargs):
        self.service_id = service_id
        super().__init__(api, notifications, **kwargs)

    def empty_form(self) -> ServiceItemForm:
        return ServiceItemForm()

    @property
    def items_path(self) -> str:
        return f"{SERVICES_PATH}/{self.service_id}/items"

    def validate(self) -> dict[str, str]:
        form = self.form
        errors = {}
        if not str(form.item_number).strip():
            errors["item_number"] = self.t("item_number_required")
        if not form.name.strip():
            errors["name"] = self.t("item_name_required")
        try:
            if parse_amount(form.price, "price") <= 0:
                errors["price"] = self.t("price_invalid")
        except ValidationError:
            errors["price"] = self.t("price_invalid")
        try:
            if parse_int(form.duration_value, "duration_value") <= 0:
                errors["duration_value"] = self.t("duration_invalid")
        except ValidationError:
            errors["duration_value"] = self.t("duration_invalid")
        return errors

    def payload(self) -> dict:
        form = self.form
        return {
            "itemNumber": str(form.item_number).strip(),
            "name": form.name.strip(),
            "nameSwahili": _optional(form.name_swahili),
            "description": _optional(form.description),
            "price": parse_amount(form.price, "price"),
            "durationValue": parse_int(form.duration_value, "duration_value"),
            "durationUnit": DurationUnit(form.duration_unit).value,
            "status": ServiceItemStatus(form.status).value,
        }


class AddServiceItemModal(_ServiceItemModal):
    success_key = "item_created"

    def build_call(self) -> ApiCall:
        return ApiCall("POST", self.items_path, json=self.payload())


class EditServiceItemModal(_ServiceItemModal):
    success_key = "item_updated"

    def __init__(self, *args, **kwargs):
        self.item_id: Optional[int] = None
        super().__init__(*args, **kwargs)

    def reset(self) -> None:
        super().reset()
        self.item_id = None

    def populate(self, item) -> None:
        self.item_id = int(_attr(item, "id"))
        price = _attr(item, "price")
        self.form = ServiceItemForm(
            item_number=_attr(item, "item_number") or "",
            name=_attr(item, "name") or "",
            name_swahili=_attr(item, "name_swahili") or "",
            description=_attr(item, "description") or "",
            price="" if price is None else str(price),
            duration_value=str(_attr(item, "duration_value") or 1),
            duration_unit=DurationUnit(_attr(item, "duration_unit") or DurationUnit.DAYS.value),
            status=ServiceItemStatus(_attr(item, "status") or ServiceItemStatus.AVAILABLE.value),
        )

    def validate(self) -> dict[str, str]:
        errors = super().validate()
        if self.item_id is None:
            errors["item"] = self.t("nothing_selected")
        return errors

    def build_call(self) -> ApiCall:
        return ApiCall("PUT", f"{self.items_path}/{self.item_id}", json=self.payload())


class DeleteServiceItemModal(ConfirmDeleteModal):
    translations = CATALOG_TRANSLATIONS
    success_key = "item_deleted"

    def __init__(self, api: AdminApiClient, notifications, *, service_id: int, **kwargs):
        self.service_id = service_id
        super().__init__(api, notifications, **kwargs)

    def build_call(self) -> ApiCall:
        return ApiCall("DELETE", f"{SERVICES_PATH}/{self.service_id}/items/{_attr(self.entity, 'id')}")


class CatalogError(Exception):
    """Raised when services or their items cannot be loaded."""


def _rows(response, key: str, what: str) -> list[dict]:
    if not response.success:
        raise CatalogError(response.message or f"Failed to load {what}")
    data = response.data
    rows = data.get(key) if isinstance(data, dict) else data
    return [row for row in rows or [] if isinstance(row, dict)]


def find_service(api: AdminApiClient, business_id: int, service_id: int) -> Optional[dict]:
    """The stored service as an API dict, or None when the business has no such service."""
    rows = _rows(api.get(SERVICES_PATH, params={"businessId": business_id}), "services", "services")
    return next((row for row in rows if row.get("id") == service_id), None)


def find_service_item(api: AdminApiClient, service_id: int, item_id: int) -> Optional[dict]:
    rows = _rows(api.get(f"{SERVICES_PATH}/{service_id}/items"), "items", "service items")
    return next((row for row in rows if row.get("id") == item_id), None)
