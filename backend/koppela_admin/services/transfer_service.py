# Overview: Store transfer workflow; moves stock between stores or out of the business in one request.

"""
Store transfer workflow.

WHY: From the operator's point of view a transfer is one logical operation
(pick source, destination, quantities, submit) even though the inventory
collaborator realizes it as a single POST.

LIFECYCLE:
1. IDLE: modal closed
2. SOURCE_SELECTION: choose an active source store; selecting one loads its inventory
3. DESTINATION_SELECTION: another store, or free-text external destination
4. ITEM_SELECTION: per-product quantity (0 = not included) and optional reason
5. SUBMITTING: validation, then one request to the transfer endpoint
6. IDLE again on success or cancel

STOCK: the quantities shown come from the last inventory load and may be
stale. Submission re-loads the source store's inventory and checks every
requested quantity against the fresh numbers before anything is sent.
Destination capacity is not checked.
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from ..i18n import Language, TranslationTable, translate
from ..models.stores import InventoryItem, Store
from ..models.transfers import DestinationType, TransferItem, TransferRequest, TransferState
from ..validation import ValidationError, parse_int
from .api_client import AdminApiClient, ApiResponse, ApiTransportError
from .notification_service import NotificationService
from .store_service import StoreError, load_inventory


logger = logging.getLogger(__name__)


TRANSFER_PATH = "/api/admin/inventory/transfer"


TRANSFER_TRANSLATIONS: TranslationTable = {
    Language.EN: {
        "title": "Store Transfer",
        "transfer_success": "Products transferred successfully",
        "transfer_error": "Failed to transfer products",
        "load_products_error": "Failed to load products",
        "select_source_first": "Please select a source store first",
        "select_destination": "Please select a destination",
        "no_items_selected": "Please select at least one product to transfer",
        "invalid_quantity": "Please enter valid quantities for all selected products",
        "insufficient_stock": "Insufficient stock for some products",
        "same_store_error": "Source and destination stores cannot be the same",
    },
    Language.SW: {
        "title": "Uhamisho wa Madukani",
        "transfer_success": "Bidhaa zimehamishwa kikamilifu",
        "transfer_error": "Imeshindwa kuhamisha bidhaa",
        "load_products_error": "Imeshindwa kupakia bidhaa",
        "select_source_first": "Tafadhali chagua duka la chanzo kwanza",
        "select_destination": "Tafadhali chagua marudio",
        "no_items_selected": "Tafadhali chagua angalau bidhaa moja ya kuhamisha",
        "invalid_quantity": "Tafadhali ingiza kiasi sahihi kwa bidhaa zote zilizochaguliwa",
        "insufficient_stock": "Hisa haitoshi kwa baadhi ya bidhaa",
        "same_store_error": "Maduka ya chanzo na marudio hayawezi kuwa sawa",
    },
}


class TransferError(Exception):
    """Raised for misuse of the workflow (unknown product, bad state)."""


def validate_selection(
    *,
    from_store_id: Optional[int],
    destination_type: DestinationType,
    to_store_id: Optional[int],
    external_destination: str,
) -> Optional[str]:
    """Source and destination rules only; the first checks of validate_transfer."""
    if not from_store_id:
        return "select_source_first"

    if destination_type == DestinationType.STORE and not to_store_id:
        return "select_destination"
    if destination_type == DestinationType.EXTERNAL and not external_destination.strip():
        return "select_destination"

    if destination_type == DestinationType.STORE and from_store_id == to_store_id:
        return "same_store_error"
    return None


def validate_transfer(
    *,
    from_store_id: Optional[int],
    destination_type: DestinationType,
    to_store_id: Optional[int],
    external_destination: str,
    items: Iterable[TransferItem],
    available: dict[int, int],
) -> Optional[str]:
    """
    Check a transfer before it is sent.

    Returns the translation key of the first failing rule, or None.
    `available` maps product id to the source store's on-hand quantity;
    a product missing from it has none.
    """
    failure = validate_selection(
        from_store_id=from_store_id,
        destination_type=destination_type,
        to_store_id=to_store_id,
        external_destination=external_destination,
    )
    if failure:
        return failure

    items = list(items)
    if any(item.quantity < 0 for item in items):
        return "invalid_quantity"

    included = [item for item in items if item.quantity > 0]
    if not included:
        return "no_items_selected"

    for item in included:
        if item.quantity > available.get(item.product_id, 0):
            return "insufficient_stock"

    return None


class StoreTransferWorkflow:
    def __init__(
        self,
        api: AdminApiClient,
        notifications: NotificationService,
        *,
        business_id: int,
        stores: list[Store],
        language: Language = Language.EN,
        on_transfer_complete: Optional[Callable[[], None]] = None,
    ):
        self.api = api
        self.notifications = notifications
        self.business_id = business_id
        self.stores = list(stores)
        self.language = language
        self.on_transfer_complete = on_transfer_complete

        self.state = TransferState.IDLE
        self.is_loading_products = False
        self.is_submitting = False
        self.succeeded = False
        self.upstream_failed = False
        self.error: Optional[str] = None
        self._reset_selections()

    def _reset_selections(self) -> None:
        self.source_store_id: Optional[int] = None
        self.destination_type = DestinationType.STORE
        self.destination_store_id: Optional[int] = None
        self.external_destination = ""
        self.products: list[InventoryItem] = []
        self.items: list[TransferItem] = []

    def t(self, key: str) -> str:
        return translate(TRANSFER_TRANSLATIONS, self.language, key)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self.state != TransferState.IDLE

    @property
    def active_stores(self) -> list[Store]:
        return [store for store in self.stores if store.is_active]

    @property
    def destination_options(self) -> list[Store]:
        return [store for store in self.active_stores if store.id != self.source_store_id]

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items if item.quantity > 0)

    @property
    def included_items(self) -> list[TransferItem]:
        return [item for item in self.items if item.quantity > 0]

    def _product(self, product_id: int) -> InventoryItem:
        for product in self.products:
            if product.product_id == product_id:
                return product
        raise TransferError(f"Product {product_id} is not stocked at the source store")

    def _item(self, product_id: int) -> TransferItem:
        for item in self.items:
            if item.product_id == product_id:
                return item
        raise TransferError(f"Product {product_id} is not stocked at the source store")

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def open(self) -> None:
        self._reset_selections()
        self.error = None
        self.succeeded = False
        self.upstream_failed = False
        self.state = TransferState.SOURCE_SELECTION

    def cancel(self) -> None:
        self._reset_selections()
        self.error = None
        self.is_loading_products = False
        self.state = TransferState.IDLE

    def select_source(self, store_id: Optional[int]) -> bool:
        """Choose the source store and load its inventory. None clears the selection."""
        self.source_store_id = store_id
        self.products = []
        self.items = []
        if self.destination_store_id == store_id:
            self.destination_store_id = None

        if not store_id:
            self.state = TransferState.SOURCE_SELECTION
            return True

        if not self.load_products():
            self.state = TransferState.SOURCE_SELECTION
            return False

        self.state = TransferState.DESTINATION_SELECTION
        return True

    def load_products(self) -> bool:
        """
        (Re)load the source store's inventory.

        On failure the previous products and entered quantities stay as they
        were. On success every stocked product gets an item; quantities and
        reasons already entered are kept.
        """
        if not self.source_store_id:
            return False

        self.is_loading_products = True
        try:
            fresh = load_inventory(self.api, self.business_id, self.source_store_id)
        except (StoreError, ApiTransportError):
            logger.exception("Failed to load inventory for store %s", self.source_store_id)
            self.upstream_failed = True
            self.error = self.t("load_products_error")
            self.notifications.show_error(self.t("title"), self.error)
            return False
        finally:
            self.is_loading_products = False

        self.products = fresh
        self._sync_items()
        return True

    def _sync_items(self) -> None:
        entered = {item.product_id: item for item in self.items}
        stocked = {product.product_id for product in self.products}
        items = [entered.get(p.product_id) or TransferItem(product_id=p.product_id) for p in self.products]
        # Requested products that vanished from the source stay, so validation reports them
        items.extend(item for item in self.items if item.product_id not in stocked and item.quantity > 0)
        self.items = items

    def choose_destination_type(self, destination_type: DestinationType) -> None:
        self.destination_type = DestinationType(destination_type)

    def select_destination_store(self, store_id: Optional[int]) -> None:
        self.destination_type = DestinationType.STORE
        self.destination_store_id = store_id
        self._advance_to_items()

    def set_external_destination(self, destination: str) -> None:
        self.destination_type = DestinationType.EXTERNAL
        self.external_destination = destination or ""
        self._advance_to_items()

    def _advance_to_items(self) -> None:
        if self.state == TransferState.DESTINATION_SELECTION:
            self.state = TransferState.ITEM_SELECTION

    def set_quantity(self, product_id: int, quantity, *, clamp: bool = True) -> int:
        """
        Record the quantity entered for a product.

        clamp=True mirrors the number input: the value is held to
        [0, last-known source quantity]. The submit-time check does not rely on it.
        """
        product = self._product(product_id)
        value = parse_int(quantity, "quantity")
        if clamp:
            value = max(0, min(value, product.quantity))
        self._item(product_id).quantity = value
        self._advance_to_items()
        return value

    def set_reason(self, product_id: int, reason: str) -> None:
        self._product(product_id)
        self._item(product_id).reason = reason or ""

    def apply_quantities(self, quantities: dict[int, int], reasons: Optional[dict[int, str]] = None) -> None:
        """
        Take exact quantities from a complete request, without clamping.

        A product the source does not stock gets an item of its own, so the
        submit-time check reports it as insufficient stock after the
        source and destination rules.
        """
        reasons = reasons or {}
        for product_id, quantity in quantities.items():
            try:
                item = self._item(product_id)
            except TransferError:
                item = TransferItem(product_id=product_id)
                self.items.append(item)
            item.quantity = quantity
            if product_id in reasons:
                item.reason = reasons[product_id] or ""
        self._advance_to_items()

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def _fail(self, key: str) -> bool:
        self.error = self.t(key)
        self.notifications.show_error(self.t("title"), self.error)
        return False

    def _validate(self, available: dict[int, int]) -> Optional[str]:
        return validate_transfer(
            from_store_id=self.source_store_id,
            destination_type=self.destination_type,
            to_store_id=self.destination_store_id,
            external_destination=self.external_destination,
            items=self.items,
            available=available,
        )

    def build_request(self) -> TransferRequest:
        external = self.destination_type == DestinationType.EXTERNAL
        return TransferRequest(
            business_id=self.business_id,
            from_store_id=self.source_store_id,
            is_external_movement=external,
            transfers=tuple(TransferItem(i.product_id, i.quantity, i.reason) for i in self.included_items),
            to_store_id=None if external else self.destination_store_id,
            external_destination=self.external_destination.strip() if external else None,
        )

    def _refresh_and_send(self) -> Optional[ApiResponse]:
        # Stock may have moved since it was loaded; check against fresh numbers
        if not self.load_products():
            return None
        fresh = {p.product_id: p.quantity for p in self.products}
        failure = self._validate(fresh)
        if failure:
            logger.info("Transfer blocked after inventory refresh: %s", failure)
            self._fail(failure)
            return None

        try:
            return self.api.post(TRANSFER_PATH, json=self.build_request().to_payload())
        except ApiTransportError:
            logger.exception("Transfer request failed")
            self.upstream_failed = True
            self._fail("transfer_error")
            return None

    def submit(self) -> bool:
        if self.is_submitting:
            logger.debug("Transfer submit ignored: request already in flight")
            return False

        self.error = None
        self.succeeded = False
        self.upstream_failed = False
        known = {p.product_id: p.quantity for p in self.products}
        failure = self._validate(known)
        if failure:
            logger.info("Transfer blocked by validation: %s", failure)
            return self._fail(failure)

        self.is_submitting = True
        self.state = TransferState.SUBMITTING
        try:
            response = self._refresh_and_send()
        finally:
            self.is_submitting = False

        if response is None:
            self.state = TransferState.ITEM_SELECTION
            return False

        if not response.success:
            self.state = TransferState.ITEM_SELECTION
            self.upstream_failed = True
            self.error = response.message or self.t("transfer_error")
            self.notifications.show_error(self.t("title"), self.error)
            return False

        self.notifications.show_success(self.t("title"), self.t("transfer_success"))
        if self.on_transfer_complete is not None:
            self.on_transfer_complete()
        self.cancel()
        self.succeeded = True
        return True


def run_transfer(
    api: AdminApiClient,
    notifications: NotificationService,
    *,
    business_id: int,
    stores: list[Store],
    from_store_id: Optional[int],
    destination_type: DestinationType,
    to_store_id: Optional[int],
    external_destination: str,
    quantities: dict[int, int],
    reasons: Optional[dict[int, str]] = None,
    language: Language = Language.EN,
    on_transfer_complete: Optional[Callable[[], None]] = None,
) -> StoreTransferWorkflow:
    """
    Drive the workflow in one pass from a complete selection (console JSON surface).

    Quantities are not clamped here, so an over-request is reported as
    insufficient stock rather than silently reduced. Failures are reported
    in the same order as an interactive submit.
    """
    workflow = StoreTransferWorkflow(
        api,
        notifications,
        business_id=business_id,
        stores=stores,
        language=language,
        on_transfer_complete=on_transfer_complete,
    )
    workflow.open()
    destination_type = DestinationType(destination_type)
    failure = validate_selection(
        from_store_id=from_store_id,
        destination_type=destination_type,
        to_store_id=to_store_id,
        external_destination=external_destination,
    )
    if failure:
        workflow._fail(failure)
        return workflow

    if not workflow.select_source(from_store_id):
        return workflow
    if destination_type == DestinationType.EXTERNAL:
        workflow.set_external_destination(external_destination)
    else:
        workflow.select_destination_store(to_store_id)

    try:
        parsed = {product_id: parse_int(quantity, "quantity") for product_id, quantity in quantities.items()}
    except ValidationError:
        workflow._fail("invalid_quantity")
        return workflow
    workflow.apply_quantities(parsed, reasons)

    workflow.submit()
    return workflow
