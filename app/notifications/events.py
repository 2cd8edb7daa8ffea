from enum import Enum


class NotificationEvent(str, Enum):
    ORDER_PLACED = "order_placed"
    PAYMENT_SUCCESS = "payment_success"
    PAYMENT_REACTIVATED = "payment_reactivated"
    ORDER_CANCELLED = "order_cancelled"
    PROJECT_CREATED = "project_created"
    QUOTE_REQUESTED = "quote_requested"
    CONTACT_RECEIVED = "contact_received"
    SUPPORT_REQUESTED = "support_requested"
    SUPPORT_UPDATED = "support_updated"
