from app.services.email_service import send_email
from app.utils.template import render_template
from app.config import settings


def send_user_email(template, subject, user, **ctx):
    html = render_template(template, user=user, **ctx)
    return send_email(to=user.email, subject=subject, html=html)


def send_admin_email(template, subject, **ctx):
    if not settings.admin_emails:
        return False
    html = render_template(template, **ctx)
    return send_email(to=settings.admin_emails, subject=subject, html=html)
