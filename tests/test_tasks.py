"""Tests for task visibility, assignment and permissions."""

import re

import pytest

from taskboard.models import Task, TaskStatus, TaskPriority
from taskboard.schemas.task import TaskCreate, TaskUpdate
from taskboard.services import task_service
from taskboard.utils import policy
from taskboard.utils.errors import NotFound, ValidationError


def visible_ids(html):
    return {int(task_id) for task_id in re.findall(r'data-task-id="(\d+)"', html)}


def task_ids_assigned_to(db, *user_ids):
    return {task.id for task in db.query(Task).filter(Task.assigned_to.in_(user_ids)).all()}


class TestListing:

    def test_administrator_sees_all_tasks(self, db_session, principal_for):
        tasks = task_service.list_tasks(db_session, policy.scope_for(principal_for("admin")))
        assert len(tasks) == 15

    def test_manager_sees_direct_reports_and_own(self, db_session, demo_users, principal_for):
        tasks = task_service.list_tasks(db_session, policy.scope_for(principal_for("jsmith")))
        expected = task_ids_assigned_to(
            db_session, demo_users["jsmith"], demo_users["mwilliams"], demo_users["ebrown"]
        )
        assert {task.id for task in tasks} == expected
        assert len(expected) == 8

    def test_manager_does_not_see_other_teams(self, db_session, demo_users, principal_for):
        tasks = task_service.list_tasks(db_session, policy.scope_for(principal_for("jsmith")))
        assert demo_users["djones"] not in {task.assigned_to for task in tasks}

    def test_sales_user_sees_only_own(self, db_session, demo_users, principal_for):
        tasks = task_service.list_tasks(db_session, policy.scope_for(principal_for("mwilliams")))
        assert len(tasks) == 4
        assert {task.assigned_to for task in tasks} == {demo_users["mwilliams"]}

    def test_reporting_user_sees_only_own(self, db_session, principal_for):
        tasks = task_service.list_tasks(db_session, policy.scope_for(principal_for("rmartinez")))
        assert tasks == []

    def test_newest_first(self, db_session, principal_for):
        tasks = task_service.list_tasks(db_session, policy.scope_for(principal_for("admin")))
        keys = [(task.created_at, task.id) for task in tasks]
        assert keys == sorted(keys, reverse=True)

    def test_stats(self, db_session, principal_for):
        tasks = task_service.list_tasks(db_session, policy.scope_for(principal_for("jsmith")))
        stats = task_service.task_stats(tasks)
        assert stats["total"] == 8
        assert stats["open"] == 5
        assert stats["in_progress"] == 3
        assert stats["completed"] == 0
        assert stats["cancelled"] == 0


class TestDashboard:

    def test_manager_dashboard(self, login_as, db_session, demo_users):
        response = login_as("jsmith").get("/dashboard")
        assert response.status_code == 200
        expected = task_ids_assigned_to(
            db_session, demo_users["jsmith"], demo_users["mwilliams"], demo_users["ebrown"]
        )
        assert visible_ids(response.text) == expected
        assert 'id="stat-total">8<' in response.text
        assert "Your tasks and your team" in response.text

    def test_sales_user_dashboard(self, login_as, db_session, demo_users):
        response = login_as("mwilliams").get("/dashboard")
        assert visible_ids(response.text) == task_ids_assigned_to(db_session, demo_users["mwilliams"])
        assert 'id="stat-total">4<' in response.text

    def test_admin_dashboard_sees_everything(self, login_as):
        response = login_as("admin").get("/dashboard")
        assert len(visible_ids(response.text)) == 15
        assert 'href="/admin"' in response.text

    def test_flash_message(self, login_as):
        response = login_as("admin").get("/dashboard?success=Task created successfully")
        assert "Task created successfully" in response.text


class TestCreate:

    def test_sales_user_assignment_is_forced_to_self(self, db_session, demo_users, principal_for):
        principal = principal_for("mwilliams")
        data = TaskCreate(title="Call client", type="Follow-up", assigned_to=demo_users["ebrown"])
        task = task_service.create_task(db_session, principal, data)
        assert task.assigned_to == demo_users["mwilliams"]
        assert task.created_by == demo_users["mwilliams"]
        assert task.status == TaskStatus.OPEN

    def test_manager_can_assign_to_report(self, db_session, demo_users, principal_for):
        principal = principal_for("jsmith")
        data = TaskCreate(title="Quarterly review", type="Review", assigned_to=demo_users["ebrown"])
        task = task_service.create_task(db_session, principal, data)
        assert task.assigned_to == demo_users["ebrown"]
        assert task.created_by == demo_users["jsmith"]

    def test_unassigned_task_goes_to_creator(self, db_session, demo_users, principal_for):
        task = task_service.create_task(db_session, principal_for("jsmith"), TaskCreate(title="Plan", type="Planning"))
        assert task.assigned_to == demo_users["jsmith"]
        assert task.priority == TaskPriority.MEDIUM

    def test_inactive_assignee_is_rejected(self, db_session, demo_users, principal_for):
        principal = principal_for("admin")
        ebrown = task_service.get_task(db_session, 2).assignee
        ebrown.status = "inactive"
        db_session.commit()
        with pytest.raises(ValidationError) as exc_info:
            task_service.create_task(
                db_session, principal, TaskCreate(title="X", type="Y", assigned_to=demo_users["ebrown"])
            )
        assert exc_info.value.message == "Assigned user not found or inactive"

    def test_create_through_form(self, login_as, db_session, demo_users):
        client = login_as("mwilliams")
        response = client.post("/tasks/create", data={
            "title": "Send proposal",
            "type": "Proposal",
            "priority": "high",
            "assigned_to": str(demo_users["djones"]),
            "due_date": "2030-01-15",
        }, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"].startswith("/dashboard?success=")

        task = db_session.query(Task).filter(Task.title == "Send proposal").one()
        assert task.assigned_to == demo_users["mwilliams"]
        assert task.priority == TaskPriority.HIGH
        assert str(task.due_date) == "2030-01-15"

    def test_missing_title_rerenders_form(self, login_as):
        response = login_as("mwilliams").post("/tasks/create", data={"title": " ", "type": "Call"})
        assert response.status_code == 400
        assert "Title is required" in response.text

    def test_sales_user_form_has_no_assignee_choice(self, login_as):
        response = login_as("mwilliams").get("/tasks/create")
        assert response.status_code == 200
        assert 'name="assigned_to"' not in response.text

    def test_manager_form_offers_assignees(self, login_as):
        response = login_as("jsmith").get("/tasks/create")
        assert 'name="assigned_to"' in response.text


class TestViewAndEdit:

    def test_owner_can_view(self, login_as, demo_users, db_session):
        task_id = min(task_ids_assigned_to(db_session, demo_users["mwilliams"]))
        response = login_as("mwilliams").get(f"/tasks/{task_id}")
        assert response.status_code == 200

    def test_sales_user_cannot_view_other_task(self, login_as, demo_users, db_session):
        task_id = min(task_ids_assigned_to(db_session, demo_users["ebrown"]))
        response = login_as("mwilliams").get(f"/tasks/{task_id}")
        assert response.status_code == 403
        assert "You do not have permission to view this task" in response.text

    def test_manager_can_edit_task_outside_team(self, login_as, demo_users, db_session):
        # djones reports to sjohnson, not jsmith
        task_id = min(task_ids_assigned_to(db_session, demo_users["djones"]))
        client = login_as("jsmith")
        assert client.get(f"/tasks/{task_id}").status_code == 200
        assert client.get(f"/tasks/{task_id}/edit").status_code == 200

    def test_missing_task_is_not_found(self, login_as):
        response = login_as("admin").get("/tasks/9999")
        assert response.status_code == 404
        assert "Task not found" in response.text

    def test_get_task_raises_not_found(self, db_session, demo_users):
        with pytest.raises(NotFound):
            task_service.get_task(db_session, 9999)

    def test_sales_user_cannot_edit_other_task(self, login_as, demo_users, db_session):
        task_id = min(task_ids_assigned_to(db_session, demo_users["djones"]))
        client = login_as("mwilliams")
        assert client.get(f"/tasks/{task_id}/edit").status_code == 403
        response = client.post(f"/tasks/{task_id}/edit", data={"title": "Hijacked", "type": "X"})
        assert response.status_code == 403

    def test_owner_updates_status_and_reassigns(self, login_as, demo_users, session_factory, db_session):
        task_id = min(task_ids_assigned_to(db_session, demo_users["mwilliams"]))
        response = login_as("mwilliams").post(f"/tasks/{task_id}/edit", data={
            "title": "Follow up with Acme Corp",
            "type": "Follow-up",
            "status": "completed",
            "priority": "high",
            "assigned_to": str(demo_users["ebrown"]),
        }, follow_redirects=False)
        assert response.status_code == 303

        db = session_factory()
        try:
            task = db.get(Task, task_id)
            assert task.status == TaskStatus.COMPLETED
            # whoever may edit a task may also hand it over
            assert task.assigned_to == demo_users["ebrown"]
        finally:
            db.close()

    def test_owner_keeps_assignment_when_none_given(self, db_session, demo_users, principal_for):
        task = task_service.get_task(db_session, min(task_ids_assigned_to(db_session, demo_users["mwilliams"])))
        data = TaskUpdate(title=task.title, type=task.type, status="in_progress")
        updated = task_service.update_task(db_session, principal_for("mwilliams"), task, data)
        assert updated.assigned_to == demo_users["mwilliams"]

    def test_reassign_to_inactive_user_is_rejected(self, login_as, demo_users, session_factory):
        db = session_factory()
        try:
            task_id = min(task_ids_assigned_to(db, demo_users["mwilliams"]))
            ebrown = task_service.get_task(db, 2).assignee
            ebrown.status = "inactive"
            db.commit()
        finally:
            db.close()

        response = login_as("mwilliams").post(f"/tasks/{task_id}/edit", data={
            "title": "Follow up with Acme Corp",
            "type": "Follow-up",
            "status": "open",
            "assigned_to": str(demo_users["ebrown"]),
        })
        assert response.status_code == 400
        assert "Assigned user not found or inactive" in response.text

        db = session_factory()
        try:
            assert db.get(Task, task_id).assigned_to == demo_users["mwilliams"]
        finally:
            db.close()

    def test_edit_form_offers_assignees_to_owner(self, login_as, demo_users, db_session):
        task_id = min(task_ids_assigned_to(db_session, demo_users["mwilliams"]))
        response = login_as("mwilliams").get(f"/tasks/{task_id}/edit")
        assert 'name="assigned_to"' in response.text
        assert "Keep current assignee" in response.text
        assert "Myself" not in response.text

    def test_create_form_labels_blank_assignee_as_self(self, login_as):
        response = login_as("jsmith").get("/tasks/create")
        assert "Myself" in response.text
        assert "Keep current assignee" not in response.text

    def test_failed_edit_keeps_submitted_values(self, login_as, demo_users, db_session):
        task_id = min(task_ids_assigned_to(db_session, demo_users["mwilliams"]))
        response = login_as("mwilliams").post(f"/tasks/{task_id}/edit", data={
            "title": "Draft title from the form",
            "description": "Unsaved notes",
            "type": " ",
            "status": "completed",
        })
        assert response.status_code == 400
        assert "Type is required" in response.text
        assert 'value="Draft title from the form"' in response.text
        assert "Unsaved notes" in response.text
        assert '<option value="completed" selected>' in response.text

    def test_manager_keeps_assignee_when_none_given(self, db_session, demo_users, principal_for):
        task = task_service.get_task(db_session, min(task_ids_assigned_to(db_session, demo_users["ebrown"])))
        data = TaskUpdate(title=task.title, type=task.type, status="in_progress")
        updated = task_service.update_task(db_session, principal_for("jsmith"), task, data)
        assert updated.assigned_to == demo_users["ebrown"]
        assert updated.status == TaskStatus.IN_PROGRESS

    def test_invalid_status_rerenders_form(self, login_as, demo_users, db_session):
        task_id = min(task_ids_assigned_to(db_session, demo_users["mwilliams"]))
        response = login_as("mwilliams").post(f"/tasks/{task_id}/edit", data={
            "title": "Follow up",
            "type": "Follow-up",
            "status": "archived",
        })
        assert response.status_code == 400


class TestDelete:

    def test_sales_user_cannot_delete_own_task(self, login_as, demo_users, db_session):
        task_id = min(task_ids_assigned_to(db_session, demo_users["mwilliams"]))
        response = login_as("mwilliams").post(f"/tasks/{task_id}/delete")
        assert response.status_code == 403
        assert "You do not have permission to delete tasks" in response.text
        assert db_session.get(Task, task_id) is not None

    @pytest.mark.parametrize("username", ["admin", "jsmith"])
    def test_privileged_roles_delete(self, username, login_as, demo_users, session_factory):
        db = session_factory()
        try:
            task_id = min(task_ids_assigned_to(db, demo_users["lgarcia"]))
        finally:
            db.close()

        response = login_as(username).post(f"/tasks/{task_id}/delete", follow_redirects=False)
        assert response.status_code == 303
        assert "Task%20deleted%20successfully" in response.headers["location"]

        db = session_factory()
        try:
            assert db.get(Task, task_id) is None
        finally:
            db.close()

    def test_delete_missing_task(self, login_as):
        assert login_as("admin").post("/tasks/9999/delete").status_code == 404
