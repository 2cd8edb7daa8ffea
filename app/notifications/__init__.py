from .events import NotificationEvent
from .dispatcher import dispatch_inquiry_event, dispatch_order_event

__all__ = [
    "NotificationEvent",
    "dispatch_inquiry_event",
    "dispatch_order_event",
]
