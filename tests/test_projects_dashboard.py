from app.constants.order_status import ProjectStatus
from app.models.project import Project
from app.services.payment_service import mark_order_paid


def _pay(session, order):
    return mark_order_paid(session=session, order_id=order.id, reference=order.payment_reference)


def test_client_sees_own_projects(client, session, pending_order, user_headers, other_headers):
    project = _pay(session, pending_order).project

    mine = client.get("/projects", headers=user_headers).json()
    assert [p["id"] for p in mine] == [project.id]

    assert client.get("/projects", headers=other_headers).json() == []
    assert client.get(f"/projects/{project.id}", headers=other_headers).status_code == 404


def test_projects_are_backfilled_for_paid_orders(client, session, pending_order, user_headers):
    result = _pay(session, pending_order)
    session.delete(result.project)
    session.commit()

    projects = client.get("/projects", headers=user_headers).json()

    assert len(projects) == 1
    assert projects[0]["order_id"] == pending_order.id


def test_admin_updates_progress(client, session, pending_order, admin_headers):
    project = _pay(session, pending_order).project

    response = client.patch(
        f"/admin/projects/{project.id}",
        json={"progress_percentage": 40, "current_stage": "Design"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["progress_percentage"] == 40

    out_of_range = client.patch(
        f"/admin/projects/{project.id}", json={"progress_percentage": 150}, headers=admin_headers
    )
    assert out_of_range.status_code == 422

    completed = client.patch(
        f"/admin/projects/{project.id}", json={"status": "completed"}, headers=admin_headers
    )
    assert completed.json()["progress_percentage"] == 100


def test_admin_project_list(client, session, pending_order, admin_headers):
    _pay(session, pending_order)

    data = client.get("/admin/projects", params={"status": "active"}, headers=admin_headers).json()

    assert data["total_items"] == 1
    assert data["results"][0]["status"] == "active"


def test_client_dashboard_stats(client, session, pending_order, user_headers):
    empty = client.get("/dashboard/stats", headers=user_headers).json()
    assert empty == {
        "active_projects": 0,
        "completed_projects": 0,
        "pending_orders": 1,
        "total_spent": 0,
    }

    project = _pay(session, pending_order).project
    stats = client.get("/dashboard/stats", headers=user_headers).json()
    assert stats["active_projects"] == 1
    assert stats["pending_orders"] == 0
    assert stats["total_spent"] == 190000

    project.status = ProjectStatus.completed
    session.add(project)
    session.commit()
    stats = client.get("/dashboard/stats", headers=user_headers).json()
    assert stats["active_projects"] == 0
    assert stats["completed_projects"] == 1


def test_admin_analytics_summary(client, session, pending_order, admin_headers):
    _pay(session, pending_order)

    data = client.get("/admin/analytics/summary", headers=admin_headers).json()

    assert data["orders_by_status"] == {"pending": 0, "paid": 1, "cancelled": 0}
    assert data["revenue"] == 190000
    assert data["active_projects"] == 1
    assert data["recent_orders"][0]["order_id"] == pending_order.id


def test_admin_gets_in_app_notification_for_new_orders(client, pending_order, admin_headers):
    notifications = client.get("/admin/notifications", headers=admin_headers).json()

    assert any(n["related_id"] == pending_order.id for n in notifications)


def test_dashboard_requires_login(client):
    assert client.get("/dashboard/stats").status_code == 401


def test_project_model_defaults():
    project = Project(order_id=1, project_name="Site")
    assert project.current_stage == "Discovery"
    assert project.status == ProjectStatus.active
