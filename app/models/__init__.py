from app.models.user import User
from app.models.service import Service
from app.models.checkout_session import CheckoutSession
from app.models.order import Order
from app.models.payment import Payment
from app.models.project import Project
from app.models.order_event import OrderEvent
from app.models.notifications import Notification
from app.models.inquiry import ContactMessage, QuoteRequest, SupportRequest

# add ALL models here
