from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..i18n import Language, TranslationTable
from ..models.stores import InventoryItem, Store, StoreType
from ..validation import is_valid_email, is_valid_phone
from .api_client import AdminApiClient, ApiCall, ApiResponse
from .form_service import ConfirmDeleteModal, FormModal, FormState


STORES_PATH = "/api/admin/stores"
INVENTORY_BY_LOCATION_PATH = "/api/admin/inventory/by-location"


STORE_TRANSLATIONS: TranslationTable = {
    Language.EN: {
        "title": "Store",
        "saved": "Store saved successfully",
        "created": "Store added successfully",
        "updated": "Store updated successfully",
        "deleted": "Store deleted successfully",
        "save_failed": "Failed to save store",
        "delete_failed": "Failed to delete store",
        "name_required": "Store name is required",
        "invalid_email": "Invalid email format",
        "invalid_phone": "Invalid phone number",
    },
    Language.SW: {
        "title": "Duka",
        "saved": "Duka limehifadhiwa",
        "created": "Duka limeongezwa kikamilifu",
        "updated": "Duka limesasishwa kikamilifu",
        "deleted": "Duka limefutwa",
        "save_failed": "Imeshindwa kuhifadhi duka",
        "delete_failed": "Imeshindwa kufuta duka",
        "name_required": "Jina la duka linahitajika",
        "invalid_email": "Muundo wa barua pepe si sahihi",
        "invalid_phone": "Nambari ya simu si sahihi",
    },
}


class StoreError(Exception):
    """Raised when store data cannot be loaded from the admin API."""


@dataclass
class StoreForm(FormState):
    name: str = ""
    name_swahili: str = ""
    store_type: StoreType = StoreType.RETAIL_STORE
    address: str = ""
    city: str = ""
    region: str = ""
    phone: str = ""
    email: str = ""
    manager_id: Optional[int] = None


def _optional(value: str) -> Optional[str]:
    value = (value or "").strip()
    return value or None


class _StoreFormModal(FormModal):
    translations = STORE_TRANSLATIONS

    def __init__(self, api: AdminApiClient, notifications, *, business_id: int, **kwargs):
        self.business_id = business_id
        super().__init__(api, notifications, **kwargs)

    def empty_form(self) -> StoreForm:
        return StoreForm()

    def validate(self) -> dict[str, str]:
        errors = {}
        if not self.form.name.strip():
            errors["name"] = self.t("name_required")
        if self.form.email.strip() and not is_valid_email(self.form.email.strip()):
            errors["email"] = self.t("invalid_email")
        if self.form.phone.strip() and not is_valid_phone(self.form.phone.strip()):
            errors["phone"] = self.t("invalid_phone")
        return errors

    def payload(self) -> dict:
        form = self.form
        payload = {
            "businessId": self.business_id,
            "name": form.name.strip(),
            "nameSwahili": _optional(form.name_swahili),
            "storeType": StoreType(form.store_type).value,
            "address": _optional(form.address),
            "city": _optional(form.city),
            "region": _optional(form.region),
            "phone": _optional(form.phone),
            "email": _optional(form.email),
            "managerId": int(form.manager_id) if form.manager_id else None,
        }
        # Optional fields the operator left empty are omitted, not sent as null
        return {k: v for k, v in payload.items() if v is not None}


class AddStoreModal(_StoreFormModal):
    success_key = "created"

    def build_call(self) -> ApiCall:
        return ApiCall("POST", STORES_PATH, json=self.payload())


class EditStoreModal(_StoreFormModal):
    success_key = "updated"

    def __init__(self, *args, **kwargs):
        self.store: Optional[Store] = None
        super().__init__(*args, **kwargs)

    def reset(self) -> None:
        super().reset()
        self.store = None

    def populate(self, store: Store) -> None:
        self.store = store
        self.form = StoreForm(
            name=store.name or "",
            name_swahili=store.name_swahili or "",
            store_type=store.store_type,
            address=store.address or "",
            city=store.city or "",
            region=store.region or "",
            phone=store.phone or "",
            email=store.email or "",
            manager_id=store.manager_id,
        )

    def validate(self) -> dict[str, str]:
        errors = super().validate()
        if self.store is None:
            errors["store"] = self.t("nothing_selected")
        return errors

    def build_call(self) -> ApiCall:
        return ApiCall("PUT", f"{STORES_PATH}/{self.store.id}", json=self.payload())


class DeleteStoreModal(ConfirmDeleteModal):
    translations = STORE_TRANSLATIONS

    def __init__(self, api: AdminApiClient, notifications, *, business_id: int, **kwargs):
        self.business_id = business_id
        super().__init__(api, notifications, **kwargs)

    def build_call(self) -> ApiCall:
        return ApiCall(
            "DELETE",
            f"{STORES_PATH}/{self.entity.id}",
            params={"businessId": self.business_id},
        )


def _require_success(response: ApiResponse, what: str) -> dict:
    if not response.success:
        raise StoreError(response.message or f"Failed to load {what}")
    return response.data or {}


def list_stores(api: AdminApiClient, business_id: int, *, include_inactive: bool = False) -> list[Store]:
    params = {"businessId": business_id}
    if include_inactive:
        params["includeInactive"] = "true"
    data = _require_success(api.get(STORES_PATH, params=params), "stores")
    return [Store.from_api(row) for row in data.get("stores") or []]


def load_inventory(api: AdminApiClient, business_id: int, store_id: int) -> list[InventoryItem]:
    response = api.get(
        INVENTORY_BY_LOCATION_PATH,
        params={"businessId": business_id, "storeId": store_id},
    )
    data = _require_success(response, "inventory")
    return [InventoryItem.from_api(row) for row in data.get("inventory") or []]


def find_store(api: AdminApiClient, business_id: int, store_id: int) -> Optional[Store]:
    """Load one store as the admin API holds it; None when it does not exist."""
    response = api.get(f"{STORES_PATH}/{store_id}", params={"businessId": business_id})
    if response.status_code == 404:
        return None
    data = _require_success(response, "store")
    row = data.get("store")
    return Store.from_api(row) if row else None
