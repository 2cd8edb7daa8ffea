from app.notifications.events import NotificationEvent
from app.notifications.channels import Channel


NOTIFICATION_RULES = {

    NotificationEvent.ORDER_PLACED: {
        Channel.EMAIL_USER: True,
        Channel.INAPP_ADMIN: True,
        Channel.EMAIL_ADMIN: True,
    },

    NotificationEvent.PAYMENT_SUCCESS: {
        Channel.EMAIL_USER: True,
        Channel.INAPP_ADMIN: True,
        Channel.EMAIL_ADMIN: True,
    },

    NotificationEvent.PAYMENT_REACTIVATED: {
        Channel.INAPP_ADMIN: True,
    },

    NotificationEvent.ORDER_CANCELLED: {
        Channel.EMAIL_USER: True,
        Channel.INAPP_ADMIN: True,
    },

    NotificationEvent.PROJECT_CREATED: {
        Channel.EMAIL_USER: True,
    },

    NotificationEvent.QUOTE_REQUESTED: {
        Channel.INAPP_ADMIN: True,
        Channel.EMAIL_ADMIN: True,
    },

    NotificationEvent.CONTACT_RECEIVED: {
        Channel.INAPP_ADMIN: True,
        Channel.EMAIL_ADMIN: True,
    },

    NotificationEvent.SUPPORT_REQUESTED: {
        Channel.INAPP_ADMIN: True,
        Channel.EMAIL_ADMIN: True,
    },

    NotificationEvent.SUPPORT_UPDATED: {
        Channel.EMAIL_USER: True,
    },

}


EMAIL_TEMPLATES = {
    NotificationEvent.ORDER_PLACED: {
        "user": ("user_emails/order_placed.html", "Order #{order_id} placed successfully"),
        "admin": ("admin_emails/new_order.html", "New order placed - #{order_id}"),
    },
    NotificationEvent.PAYMENT_SUCCESS: {
        "user": ("user_emails/payment_success.html", "Payment received for order #{order_id}"),
        "admin": ("admin_emails/order_paid.html", "Order #{order_id} paid"),
    },
    NotificationEvent.ORDER_CANCELLED: {
        "user": ("user_emails/order_cancelled.html", "Order #{order_id} cancelled"),
    },
    NotificationEvent.PROJECT_CREATED: {
        "user": ("user_emails/project_created.html", "Your project has started"),
    },
    NotificationEvent.QUOTE_REQUESTED: {
        "admin": ("admin_emails/quote_request.html", "New quote request from {full_name}"),
    },
    NotificationEvent.CONTACT_RECEIVED: {
        "admin": ("admin_emails/contact_message.html", "Contact form: {topic}"),
    },
    NotificationEvent.SUPPORT_REQUESTED: {
        "admin": ("admin_emails/support_request.html", "Support request #{support_id}: {topic}"),
    },
    NotificationEvent.SUPPORT_UPDATED: {
        "user": ("user_emails/support_updated.html", "Support request #{support_id} is {status}"),
    },
}


ADMIN_MESSAGES = {
    NotificationEvent.ORDER_PLACED: ("New Order Placed", "Order #{order_id} placed for {service_name} ({total_price})"),
    NotificationEvent.PAYMENT_SUCCESS: ("Order Paid", "Order #{order_id} paid ({total_price})"),
    NotificationEvent.PAYMENT_REACTIVATED: ("Payment Reactivated", "A new payment link was issued for order #{order_id}"),
    NotificationEvent.ORDER_CANCELLED: ("Order Cancelled", "Order #{order_id} was cancelled"),
    NotificationEvent.QUOTE_REQUESTED: ("New Quote Request", "{full_name} requested a quote: {project_type}, budget {budget_range}"),
    NotificationEvent.CONTACT_RECEIVED: ("New Contact Message", "{name} wrote: {topic}"),
    NotificationEvent.SUPPORT_REQUESTED: ("New Support Request", "Support request #{support_id} opened: {topic}"),
}
