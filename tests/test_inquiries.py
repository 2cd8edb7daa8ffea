import pytest
from sqlmodel import select

from app.config import settings
from app.models.inquiry import QuoteRequest
from app.models.notifications import Notification
from app.services.payment_service import mark_order_paid
from app.utils.template import render_template

QUOTE = {
    "full_name": "Grace Hopper",
    "email": "grace@example.com",
    "company": "  ",
    "project_type": "ecommerce",
    "budget_range": "10k-25k",
    "timeline": "1-2months",
    "description": "An online shop for hand-made furniture with delivery tracking and reviews.",
    "features": ["Payments", "Reviews", " Payments "],
}


def _admin_notifications(session, trigger_source):
    return session.exec(
        select(Notification).where(Notification.trigger_source == trigger_source)
    ).all()


# -------- QUOTE REQUESTS --------

def test_quote_request_is_stored_and_notifies_admin(client, session):
    response = client.post("/inquiries/quote-request", json=QUOTE)

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "new"
    assert data["company"] is None
    assert data["features"] == ["Payments", "Reviews"]

    notes = _admin_notifications(session, "quote_requested")
    assert len(notes) == 1
    assert notes[0].related_id == data["id"]
    assert notes[0].content == "Grace Hopper requested a quote: ecommerce, budget 10k-25k"


@pytest.mark.parametrize(
    "changes",
    [
        {"description": "Too short"},
        {"budget_range": "1k"},
        {"project_type": "game"},
        {"timeline": "someday"},
        {"email": "not-an-email"},
        {"full_name": "   "},
    ],
)
def test_quote_request_validation(client, changes):
    response = client.post("/inquiries/quote-request", json={**QUOTE, **changes})
    assert response.status_code == 422


def test_quote_request_links_logged_in_user(client, session, user, user_headers):
    response = client.post("/inquiries/quote-request", json=QUOTE, headers=user_headers)

    quote = session.get(QuoteRequest, response.json()["id"])
    assert quote.user_id == user.id


def test_admin_lists_and_closes_quote_requests(client, admin_headers):
    quote_id = client.post("/inquiries/quote-request", json=QUOTE).json()["id"]

    listing = client.get("/admin/inquiries/quote-requests", headers=admin_headers).json()
    assert listing["total_items"] == 1
    assert listing["results"][0]["email"] == "grace@example.com"

    closed = client.patch(
        f"/admin/inquiries/quote-requests/{quote_id}",
        json={"status": "closed"},
        headers=admin_headers,
    )
    assert closed.json()["status"] == "closed"

    open_only = client.get(
        "/admin/inquiries/quote-requests", params={"status": "new"}, headers=admin_headers
    ).json()
    assert open_only["total_items"] == 0


def test_inquiry_admin_routes_require_admin(client, user_headers):
    assert client.get("/admin/inquiries/quote-requests", headers=user_headers).status_code == 403
    assert client.get("/admin/inquiries/contact-messages").status_code == 401


# -------- CONTACT --------

def test_contact_message_notifies_admin(client, session):
    response = client.post(
        "/inquiries/contact",
        json={
            "name": "Linus",
            "email": "linus@example.com",
            "subject": "Partnership",
            "message": "Can we talk about a white-label deal?",
        },
    )

    assert response.status_code == 201
    notes = _admin_notifications(session, "contact_received")
    assert [n.content for n in notes] == ["Linus wrote: Partnership"]


def test_contact_message_requires_every_field(client):
    response = client.post(
        "/inquiries/contact", json={"name": "Linus", "email": "linus@example.com"}
    )
    assert response.status_code == 422


def test_contact_message_emails_admins(monkeypatch, client):
    sent = []
    monkeypatch.setattr(settings, "admin_emails", ["owner@example.com"])
    monkeypatch.setattr(
        "app.notifications.email_handlers.send_email",
        lambda to, subject, html: sent.append((to, subject, html)) or True,
    )

    client.post(
        "/inquiries/contact",
        json={
            "name": "Linus",
            "email": "linus@example.com",
            "subject": "Partnership",
            "message": "Can we talk about a white-label deal?",
        },
    )

    assert len(sent) == 1
    to, subject, html = sent[0]
    assert to == ["owner@example.com"]
    assert subject == "Contact form: Partnership"
    assert "white-label" in html


# -------- SUPPORT --------

def test_support_request_lifecycle(client, session, user_headers, admin_headers, other_headers):
    created = client.post(
        "/support-requests",
        json={"subject": "Site is down", "description": "The homepage returns 500."},
        headers=user_headers,
    )
    assert created.status_code == 201
    ticket = created.json()
    assert ticket["status"] == "open"
    assert len(_admin_notifications(session, "support_requested")) == 1

    assert [t["id"] for t in client.get("/support-requests", headers=user_headers).json()] == [ticket["id"]]
    assert client.get("/support-requests", headers=other_headers).json() == []
    assert client.get(f"/support-requests/{ticket['id']}", headers=other_headers).status_code == 404
    assert len(client.get("/support-requests", headers=admin_headers).json()) == 1

    resolved = client.patch(
        f"/admin/inquiries/support-requests/{ticket['id']}",
        json={"status": "resolved"},
        headers=admin_headers,
    )
    assert resolved.json()["status"] == "resolved"
    assert resolved.json()["resolved_at"] is not None

    blocked = client.patch(
        f"/admin/inquiries/support-requests/{ticket['id']}",
        json={"status": "in_progress"},
        headers=admin_headers,
    )
    assert blocked.status_code == 409
    assert blocked.json()["current_status"] == "resolved"

    reopened = client.patch(
        f"/admin/inquiries/support-requests/{ticket['id']}",
        json={"status": "open"},
        headers=admin_headers,
    )
    assert reopened.json()["resolved_at"] is None


def test_support_request_requires_login(client):
    response = client.post("/support-requests", json={"subject": "x", "description": "y"})
    assert response.status_code == 401


def test_support_request_for_own_project_only(client, session, pending_order, user_headers, other_headers):
    project = mark_order_paid(session=session, order_id=pending_order.id, reference="ref_1").project
    body = {"subject": "Copy change", "description": "Swap the hero text.", "project_id": project.id}

    assert client.post("/support-requests", json=body, headers=other_headers).status_code == 404

    mine = client.post("/support-requests", json=body, headers=user_headers)
    assert mine.status_code == 201
    assert mine.json()["project_id"] == project.id


def test_support_update_emails_the_client(monkeypatch, client, user, user_headers, admin_headers):
    sent = []
    monkeypatch.setattr(
        "app.notifications.dispatcher.send_user_email",
        lambda template, subject, user, **ctx: sent.append((template, subject, user.email)),
    )
    ticket_id = client.post(
        "/support-requests",
        json={"subject": "Site is down", "description": "The homepage returns 500."},
        headers=user_headers,
    ).json()["id"]

    client.patch(
        f"/admin/inquiries/support-requests/{ticket_id}",
        json={"status": "in_progress"},
        headers=admin_headers,
    )

    assert sent == [
        ("user_emails/support_updated.html", f"Support request #{ticket_id} is in_progress", user.email)
    ]


def test_support_email_template_renders(user):
    html = render_template(
        "user_emails/support_updated.html",
        user=user,
        support_id=3,
        topic="Site is down",
        status_label="in progress",
        store_name="Agency Storefront",
    )
    assert "Site is down" in html
    assert "in progress" in html
