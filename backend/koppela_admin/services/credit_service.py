from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..i18n import Language, TranslationTable
from ..models.credit import CreditSale, PaymentMethod, ReminderChannel
from ..validation import ValidationError, parse_amount
from .api_client import AdminApiClient, ApiCall, ApiResponse
from .form_service import FormModal, FormState


PAYMENTS_PATH = "/api/admin/credit/payments"
REMINDERS_PATH = "/api/admin/credit/reminders"
CREDIT_SALES_PATH = "/api/admin/credit/sales"


CREDIT_TRANSLATIONS: TranslationTable = {
    Language.EN: {
        "payment_title": "Record Payment",
        "payment_recorded": "Payment recorded successfully",
        "payment_failed": "Failed to record payment",
        "invalid_amount": "Please enter a valid amount",
        "exceeds_balance": "Amount cannot exceed outstanding balance",
        "reminder_title": "Reminder Sent",
        "reminder_sent": "Payment reminder has been sent successfully",
        "reminders_sent": "Reminders sent successfully to {{count}} customers",
        "reminder_failed": "Failed to send reminder",
        "empty_message": "Please enter a message",
        "default_message": (
            "Hello {{customer}}, this is a friendly reminder that you have an outstanding "
            "balance of TSh {{amount}} from {{business}}. Please make your payment at your "
            "earliest convenience. Thank you!"
        ),
    },
    Language.SW: {
        "payment_title": "Rekodi Malipo",
        "payment_recorded": "Malipo yamerekodiwa kikamilifu",
        "payment_failed": "Imeshindwa kurekodi malipo",
        "invalid_amount": "Tafadhali ingiza kiasi sahihi",
        "exceeds_balance": "Kiasi hakiwezi kuzidi salio linalodaiwa",
        "reminder_title": "Ukumbusho Umetumwa",
        "reminder_sent": "Ukumbusho wa malipo umetumwa kikamilifu",
        "reminders_sent": "Vikumbusho vimetumwa kwa mafanikio kwa wateja {{count}}",
        "reminder_failed": "Imeshindwa kutuma ukumbusho",
        "empty_message": "Tafadhali ingiza ujumbe",
        "default_message": (
            "Habari {{customer}}, huu ni ukumbusho wa kirafiki kuwa una salio la TSh {{amount}} "
            "kutoka {{business}}. Tafadhali fanya malipo yako haraka iwezekanavyo. Asante!"
        ),
    },
}


@dataclass
class PaymentForm(FormState):
    amount: str = ""
    payment_method: PaymentMethod = PaymentMethod.CASH
    reference: str = ""
    notes: str = ""


class RecordPaymentModal(FormModal):
    translations = CREDIT_TRANSLATIONS
    title_key = "payment_title"
    success_key = "payment_recorded"
    failure_key = "payment_failed"

    def __init__(self, api: AdminApiClient, notifications, *, business_id: int, **kwargs):
        self.business_id = business_id
        self.sale: Optional[CreditSale] = None
        super().__init__(api, notifications, **kwargs)

    def empty_form(self) -> PaymentForm:
        return PaymentForm()

    def reset(self) -> None:
        super().reset()
        self.sale = None

    def populate(self, sale: CreditSale) -> None:
        self.sale = sale

    def validate(self) -> dict[str, str]:
        if self.sale is None:
            return {"sale": self.t("nothing_selected")}
        try:
            amount = parse_amount(self.form.amount, "amount")
        except ValidationError:
            return {"amount": self.t("invalid_amount")}
        if amount <= 0:
            return {"amount": self.t("invalid_amount")}
        if amount > self.sale.outstanding_balance:
            return {"amount": self.t("exceeds_balance")}
        return {}

    def build_call(self) -> ApiCall:
        form = self.form
        payload = {
            "orderId": self.sale.id,
            "customerId": self.sale.customer_id,
            "businessId": self.business_id,
            "amount": parse_amount(form.amount, "amount"),
            "paymentMethod": PaymentMethod(form.payment_method).value,
        }
        if form.reference.strip():
            payload["reference"] = form.reference.strip()
        if form.notes.strip():
            payload["notes"] = form.notes.strip()
        return ApiCall("POST", PAYMENTS_PATH, json=payload)


@dataclass
class ReminderForm(FormState):
    channel: ReminderChannel = ReminderChannel.SMS
    message: str = ""


def _format_amount(value: float) -> str:
    return f"{value:,.0f}" if float(value).is_integer() else f"{value:,.2f}"


def render_reminder(template: str, sale: CreditSale, business_name: str) -> str:
    return (
        template
        .replace("{{customer}}", sale.customer_name)
        .replace("{{amount}}", _format_amount(sale.outstanding_balance))
        .replace("{{dueDate}}", sale.due_date or "N/A")
        .replace("{{business}}", business_name)
    )


class SendReminderModal(FormModal):
    """
    Payment reminders for one or more credit sales.

    The preview fills in the placeholders only when exactly one sale is
    selected; with several, the message is sent as a template.
    """

    translations = CREDIT_TRANSLATIONS
    title_key = "reminder_title"
    success_key = "reminder_sent"
    failure_key = "reminder_failed"

    def __init__(
        self,
        api: AdminApiClient,
        notifications,
        *,
        business_id: int,
        business_name: str = "Your Business",
        **kwargs,
    ):
        self.business_id = business_id
        self.business_name = business_name
        self.sales: list[CreditSale] = []
        super().__init__(api, notifications, **kwargs)

    def empty_form(self) -> ReminderForm:
        return ReminderForm(message=self.t("default_message"))

    def reset(self) -> None:
        super().reset()
        self.sales = []

    def populate(self, sales: Sequence[CreditSale]) -> None:
        self.sales = list(sales)

    @property
    def preview(self) -> Optional[str]:
        if len(self.sales) != 1:
            return None
        return render_reminder(self.form.message, self.sales[0], self.business_name)

    def validate(self) -> dict[str, str]:
        errors = {}
        if not self.sales:
            errors["sales"] = self.t("nothing_selected")
        if not self.form.message.strip():
            errors["message"] = self.t("empty_message")
        return errors

    def build_call(self) -> ApiCall:
        return ApiCall(
            "POST",
            REMINDERS_PATH,
            json={
                "businessId": self.business_id,
                "saleIds": [sale.id for sale in self.sales],
                "channel": ReminderChannel(self.form.channel).value,
                "message": self.form.message,
            },
        )

    def success_message(self, response: ApiResponse) -> str:
        if len(self.sales) > 1:
            return self.t("reminders_sent").replace("{{count}}", str(len(self.sales)))
        return self.t("reminder_sent")


class CreditError(Exception):
    """Raised when credit sales cannot be loaded."""


def _sales_page(api: AdminApiClient, business_id: int, limit: int, offset: int) -> tuple[list[CreditSale], bool]:
    response = api.get(CREDIT_SALES_PATH, params={"businessId": business_id, "limit": limit, "offset": offset})
    if not response.success:
        raise CreditError(response.message or "Failed to fetch credit sales")
    data = response.data or {}
    sales = [CreditSale.from_api(row) for row in data.get("sales") or []]
    has_more = (data.get("pagination") or {}).get("hasMore")
    if has_more is None:
        has_more = len(sales) >= limit
    return sales, bool(has_more) and bool(sales)


def list_credit_sales(api: AdminApiClient, business_id: int, *, limit: int = 50, offset: int = 0) -> list[CreditSale]:
    return _sales_page(api, business_id, limit, offset)[0]


def find_credit_sales(
    api: AdminApiClient, business_id: int, sale_ids: Iterable[int], *, page_size: int = 50
) -> dict[int, CreditSale]:
    """Page through the business's credit sales until every requested id is found or the list ends."""
    wanted = set(sale_ids)
    found: dict[int, CreditSale] = {}
    offset = 0
    while wanted - found.keys():
        sales, has_more = _sales_page(api, business_id, page_size, offset)
        found.update((sale.id, sale) for sale in sales if sale.id in wanted)
        if not has_more:
            break
        offset += len(sales)
    return found
