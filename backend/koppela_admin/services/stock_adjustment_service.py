"""
Stock adjustments record stock leaving a product without a sale
(damage, expiry, theft, ...). The quantity cannot exceed what is on hand
across all stores; the server still performs the authoritative check.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..i18n import Language, TranslationTable
from ..models.inventory import AdjustableProduct, AdjustmentType
from ..time_utils import today_iso
from ..validation import ValidationError, parse_amount, parse_int
from .api_client import AdminApiClient, ApiCall
from .form_service import FormModal, FormState


STOCK_ADJUSTMENTS_PATH = "/api/admin/stock-adjustments"
PRODUCTS_PATH = "/api/admin/products"


STOCK_ADJUSTMENT_TRANSLATIONS: TranslationTable = {
    Language.EN: {
        "title": "Stock Adjustment",
        "saved": "Stock adjustment created successfully",
        "save_failed": "Failed to create stock adjustment",
        "quantity_required": "Quantity is required",
        "quantity_invalid": "Quantity must be a whole number greater than zero",
        "quantity_too_high": "Quantity cannot exceed current stock",
        "unit_cost_required": "Unit cost is required",
        "unit_cost_invalid": "Unit cost must be zero or more",
        "reason_required": "Reason is required",
    },
    Language.SW: {
        "title": "Marekebisho ya Hisa",
        "saved": "Marekebisho ya hisa yameundwa kikamilifu",
        "save_failed": "Imeshindwa kuunda marekebisho ya hisa",
        "quantity_required": "Kiasi kinahitajika",
        "quantity_invalid": "Kiasi lazima kiwe namba kamili zaidi ya sifuri",
        "quantity_too_high": "Kiasi hakiwezi kuzidi hisa iliyopo",
        "unit_cost_required": "Bei ya kipande inahitajika",
        "unit_cost_invalid": "Bei ya kipande lazima iwe sifuri au zaidi",
        "reason_required": "Sababu inahitajika",
    },
}


@dataclass
class StockAdjustmentForm(FormState):
    adjustment_type: AdjustmentType = AdjustmentType.DAMAGE
    quantity: str = ""
    unit_cost: str = ""
    store_id: Optional[int] = None
    reason: str = ""
    notes: str = ""
    reference_number: str = ""
    adjustment_date: str = ""


class StockAdjustmentModal(FormModal):
    translations = STOCK_ADJUSTMENT_TRANSLATIONS

    def __init__(self, api: AdminApiClient, notifications, *, business_id: int, **kwargs):
        self.business_id = business_id
        self.product: Optional[AdjustableProduct] = None
        super().__init__(api, notifications, **kwargs)

    def empty_form(self) -> StockAdjustmentForm:
        return StockAdjustmentForm(adjustment_date=today_iso())

    def reset(self) -> None:
        super().reset()
        self.product = None

    def populate(self, product: AdjustableProduct) -> None:
        self.product = product
        if product.cost_price is not None:
            self.form.unit_cost = str(product.cost_price)
        if product.inventory:
            self.form.store_id = product.inventory[0].store_id

    @property
    def current_stock(self) -> int:
        return self.product.on_hand if self.product else 0

    @property
    def total_cost(self) -> float:
        """Live quantity x unit cost; 0 while either input is incomplete."""
        try:
            return parse_int(self.form.quantity, "quantity") * parse_amount(self.form.unit_cost, "unit_cost")
        except ValidationError:
            return 0.0

    def validate(self) -> dict[str, str]:
        form = self.form
        errors = {}
        if self.product is None:
            errors["product"] = self.t("nothing_selected")

        if not str(form.quantity).strip():
            errors["quantity"] = self.t("quantity_required")
        else:
            try:
                quantity = parse_int(form.quantity, "quantity")
            except ValidationError:
                quantity = 0
            if quantity <= 0:
                errors["quantity"] = self.t("quantity_invalid")
            elif quantity > self.current_stock:
                errors["quantity"] = self.t("quantity_too_high")

        if not str(form.unit_cost).strip():
            errors["unit_cost"] = self.t("unit_cost_required")
        else:
            try:
                if parse_amount(form.unit_cost, "unit_cost") < 0:
                    errors["unit_cost"] = self.t("unit_cost_invalid")
            except ValidationError:
                errors["unit_cost"] = self.t("unit_cost_invalid")

        if not form.reason.strip():
            errors["reason"] = self.t("reason_required")
        return errors

    def build_call(self) -> ApiCall:
        form = self.form
        return ApiCall(
            "POST",
            STOCK_ADJUSTMENTS_PATH,
            json={
                "businessId": self.business_id,
                "productId": self.product.id,
                "storeId": int(form.store_id) if form.store_id else None,
                "adjustmentType": AdjustmentType(form.adjustment_type).value,
                "quantity": parse_int(form.quantity, "quantity"),
                "unitCost": parse_amount(form.unit_cost, "unit_cost"),
                "reason": form.reason.strip(),
                "notes": form.notes.strip() or None,
                "referenceNumber": form.reference_number.strip() or None,
                "adjustmentDate": form.adjustment_date or today_iso(),
            },
        )


class StockAdjustmentError(Exception):
    """Raised when the product to adjust cannot be loaded."""


def load_product(api: AdminApiClient, product_id: int) -> AdjustableProduct:
    response = api.get(f"{PRODUCTS_PATH}/{product_id}")
    if not response.success or not response.data:
        raise StockAdjustmentError(response.message or "Failed to load product")
    return AdjustableProduct.from_api(response.data)
