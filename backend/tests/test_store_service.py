"""
Store modal and form lifecycle tests.

Verifies:
- Local validation blocks the request and keeps the modal open
- A successful save fires on_success exactly once and resets the form
- Server failures leave the input intact and show the server message
- A submit while one is in flight is ignored
- Deletion needs an explicit confirmation
"""

import httpx
import pytest

from koppela_admin.i18n import Language
from koppela_admin.models.stores import Store, StoreType
from koppela_admin.services.store_service import (
    STORES_PATH,
    AddStoreModal,
    DeleteStoreModal,
    EditStoreModal,
    StoreError,
    find_store,
    list_stores,
)
from koppela_admin.validation import ValidationError


@pytest.fixture
def add_modal(api, notifications):
    return AddStoreModal(api, notifications, business_id=1)


class TestStoreValidation:
    """Nothing is sent while the form is invalid."""

    def test_name_required(self, add_modal, fake_api):
        add_modal.open()
        assert add_modal.submit() is False
        assert add_modal.errors == {"name": "Store name is required"}
        assert add_modal.is_open
        assert fake_api.calls == []

    def test_email_and_phone_formats(self, add_modal):
        add_modal.open()
        add_modal.change(name="Mwenge", email="not-an-email", phone="12")
        assert add_modal.submit() is False
        assert set(add_modal.errors) == {"email", "phone"}

    def test_change_clears_field_error(self, add_modal):
        add_modal.open()
        add_modal.submit()
        add_modal.change(name="Mwenge")
        assert "name" not in add_modal.errors

    def test_unknown_field_is_rejected(self, add_modal):
        add_modal.open()
        with pytest.raises(ValidationError):
            add_modal.change(colour="blue")

    def test_swahili_messages(self, api, notifications):
        modal = AddStoreModal(api, notifications, business_id=1, language=Language.SW)
        modal.open()
        modal.submit()
        assert modal.errors["name"] == "Jina la duka linahitajika"


class TestStoreSubmission:
    """One request per valid submit; results drive toasts and callbacks."""

    def test_success_calls_back_once_and_resets(self, api, notifications, fake_api):
        fake_api.ok("POST", STORES_PATH, {"id": 9, "name": "Mwenge"})
        saved = []
        modal = AddStoreModal(api, notifications, business_id=1, on_success=saved.append)
        modal.open()
        modal.change(name="  Mwenge  ", city="Dar es Salaam", store_type=StoreType.WAREHOUSE)

        assert modal.submit() is True

        assert saved == [{"id": 9, "name": "Mwenge"}]
        assert fake_api.calls[0].json == {
            "businessId": 1,
            "name": "Mwenge",
            "storeType": "warehouse",
            "city": "Dar es Salaam",
        }
        assert modal.is_open is False
        assert modal.form.name == ""
        assert notifications.toasts[-1].message == "Store added successfully"

    def test_server_failure_keeps_input(self, add_modal, fake_api, notifications):
        fake_api.fail("POST", STORES_PATH, "A store with this name already exists")
        add_modal.open()
        add_modal.change(name="Mwenge")

        assert add_modal.submit() is False

        assert add_modal.is_open
        assert add_modal.form.name == "Mwenge"
        assert add_modal.upstream_failed is True
        assert notifications.toasts[-1].message == "A store with this name already exists"
        assert notifications.toasts[-1].type.value == "error"

    def test_failure_without_message_uses_translated_text(self, add_modal, fake_api, notifications):
        fake_api.on("POST", STORES_PATH, {"success": False}, status=500)
        add_modal.open()
        add_modal.change(name="Mwenge")
        add_modal.submit()
        assert notifications.toasts[-1].message == "Failed to save store"

    def test_transport_error_is_reported(self, add_modal, fake_api, notifications):
        fake_api.on("POST", STORES_PATH, httpx.ReadTimeout("slow"))
        add_modal.open()
        add_modal.change(name="Mwenge")

        assert add_modal.submit() is False
        assert add_modal.is_submitting is False
        assert add_modal.upstream_failed is True
        assert notifications.toasts[-1].message == "Failed to save store"

    def test_resubmission_while_in_flight_is_ignored(self, api, notifications, fake_api):
        saved = []
        modal = AddStoreModal(api, notifications, business_id=1, on_success=saved.append)
        nested = []

        def reply(request):
            # The operator clicks Save again while the first request is pending
            nested.append(modal.submit())
            return httpx.Response(200, json={"success": True, "data": {"id": 1}})

        fake_api.on("POST", STORES_PATH, reply)
        modal.open()
        modal.change(name="Mwenge")

        assert modal.submit() is True

        assert nested == [False]
        assert len(fake_api.calls_to("POST", STORES_PATH)) == 1
        assert saved == [{"id": 1}]


class TestEditAndDelete:
    """Edit pre-fills from the store; delete requires confirmation."""

    def test_edit_prefills_and_puts(self, api, notifications, fake_api):
        fake_api.ok("PUT", f"{STORES_PATH}/4")
        store = Store(id=4, name="Old", store_type=StoreType.MAIN_STORE, city="Arusha")
        modal = EditStoreModal(api, notifications, business_id=1)
        modal.open(store)
        assert modal.form.city == "Arusha"

        modal.change(name="New")
        assert modal.submit() is True

        call = fake_api.calls[0]
        assert call.method == "PUT"
        assert call.json["name"] == "New"
        assert call.json["storeType"] == "main_store"

    def test_delete_without_selection_is_blocked(self, api, notifications, fake_api):
        modal = DeleteStoreModal(api, notifications, business_id=1)
        assert modal.confirm() is False
        assert fake_api.calls == []

    def test_delete_after_confirmation(self, api, notifications, fake_api):
        fake_api.ok("DELETE", f"{STORES_PATH}/4")
        modal = DeleteStoreModal(api, notifications, business_id=1)
        modal.open(Store(id=4, name="Old", store_type=StoreType.RETAIL_STORE))

        assert modal.confirm() is True
        assert fake_api.calls[0].params == {"businessId": "1"}
        assert notifications.toasts[-1].message == "Store deleted successfully"


class TestListStores:
    def test_parses_stores(self, api, fake_api):
        fake_api.ok("GET", STORES_PATH, {"stores": [
            {"id": 1, "name": "Main", "storeType": "main_store", "isActive": True, "_count": {"inventory": 3}},
            {"id": 2, "name": "Odd", "storeType": "kiosk"},
        ]})
        stores = list_stores(api, 1)
        assert stores[0].inventory_count == 3
        assert stores[1].store_type == StoreType.RETAIL_STORE

    def test_failure_raises(self, api, fake_api):
        fake_api.fail("GET", STORES_PATH, "Unauthorized", status=401)
        with pytest.raises(StoreError):
            list_stores(api, 1)


class TestFindStore:
    def test_found(self, api, fake_api):
        fake_api.ok("GET", f"{STORES_PATH}/7", {"store": {"id": 7, "name": "Depot", "storeType": "warehouse"}})
        store = find_store(api, 1, 7)
        assert store.store_type == StoreType.WAREHOUSE
        assert fake_api.calls[0].params == {"businessId": "1"}

    def test_missing(self, api, fake_api):
        fake_api.fail("GET", f"{STORES_PATH}/7", "Store not found", status=404)
        assert find_store(api, 1, 7) is None

    def test_failure_raises(self, api, fake_api):
        fake_api.fail("GET", f"{STORES_PATH}/7", "Unauthorized", status=401)
        with pytest.raises(StoreError):
            find_store(api, 1, 7)
