from .notifications import (
    ToastType, NotificationType, ToastNotification, PersistentNotification, DEFAULT_TOAST_DURATION_MS,
)
from .stores import StoreType, Store, InventoryItem
from .transfers import DestinationType, TransferState, TransferItem, TransferRequest
from .business import BusinessType, BusinessCategory
from .users import UserRole, AddUserMode, BusinessUser
from .catalog import ServiceType, ServiceItemStatus, DurationUnit
from .inventory import AdjustmentType, StockLevel, AdjustableProduct
from .credit import PaymentMethod, ReminderChannel, CreditSale
from .subscription import BillingCycle, SubscriptionPlan

__all__ = [
    'ToastType', 'NotificationType', 'ToastNotification', 'PersistentNotification', 'DEFAULT_TOAST_DURATION_MS',
    'StoreType', 'Store', 'InventoryItem',
    'DestinationType', 'TransferState', 'TransferItem', 'TransferRequest',
    'BusinessType', 'BusinessCategory',
    'UserRole', 'AddUserMode', 'BusinessUser',
    'ServiceType', 'ServiceItemStatus', 'DurationUnit',
    'AdjustmentType', 'StockLevel', 'AdjustableProduct',
    'PaymentMethod', 'ReminderChannel', 'CreditSale',
    'BillingCycle', 'SubscriptionPlan',
]
