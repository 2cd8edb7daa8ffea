from enum import Enum


class OrderStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    cancelled = "cancelled"


class ProjectStatus(str, Enum):
    active = "active"
    paused = "paused"
    completed = "completed"


class PaymentStatus(str, Enum):
    pending = "pending"
    succeeded = "succeeded"
    failed = "failed"


ALLOWED_TRANSITIONS = {
    OrderStatus.pending: [OrderStatus.paid, OrderStatus.cancelled],
    OrderStatus.paid: [],
    OrderStatus.cancelled: [],
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return OrderStatus(target) in ALLOWED_TRANSITIONS.get(OrderStatus(current), [])


class OrderEventType(str, Enum):
    order_placed = "order_placed"
    payment_initialized = "payment_initialized"
    payment_init_failed = "payment_init_failed"
    payment_reactivated = "payment_reactivated"
    payment_success = "payment_success"
    payment_failed = "payment_failed"
    payment_amount_mismatch = "payment_amount_mismatch"
    project_created = "project_created"
    order_cancelled = "order_cancelled"


# timeline label used when the caller does not pass one
EVENT_LABELS = {
    OrderEventType.order_placed: "Order placed",
    OrderEventType.payment_initialized: "Payment link created",
    OrderEventType.payment_init_failed: "Payment initialization failed",
    OrderEventType.payment_reactivated: "Payment link renewed",
    OrderEventType.payment_success: "Payment received",
    OrderEventType.payment_failed: "Payment failed",
    OrderEventType.payment_amount_mismatch: "Payment amount did not match order total",
    OrderEventType.project_created: "Project created",
    OrderEventType.order_cancelled: "Order cancelled",
}
