"""Tests for HTTP routes with a mocked engine."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from leancoach.app import app
from leancoach.export.pdf import ExportTimeoutError
from leancoach.models import ChatMessage, ChatRole, Comment, User
from leancoach.routes.auth import get_current_user_record
from leancoach.routes.deps import get_engine
from leancoach.services.ai_service import AIResponseError


@pytest.fixture
def engine(document):
    engine = MagicMock()
    engine.org_service = AsyncMock()
    engine.org_service.get_masked_api_key = MagicMock(return_value="sk-t...7890")
    engine.users_service = AsyncMock()
    engine.department_service = AsyncMock()
    engine.department_service.get_membership.return_value = None
    engine.a3_service = AsyncMock()
    engine.a3_service.get_document.return_value = document
    engine.comment_service = AsyncMock()
    engine.activity_service = AsyncMock()
    engine.ai_service = AsyncMock()
    engine.export_service = AsyncMock()
    engine.org_storage = AsyncMock()
    engine.coach_agent = AsyncMock()
    return engine


@pytest.fixture
def as_user(engine):
    def login(user):
        app.dependency_overrides[get_engine] = lambda: engine
        app.dependency_overrides[get_current_user_record] = lambda: user
        return TestClient(app)

    yield login
    app.dependency_overrides.clear()


def test_root(as_user, author):
    response = as_user(author).get("/")

    assert response.status_code == 200
    assert response.json()["service"] == "Lean Coach"


def test_unauthenticated_request_is_401(engine, document):
    app.dependency_overrides[get_engine] = lambda: engine
    try:
        response = TestClient(app).get(f"/api/v1/a3/{document.id}")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 401


def test_author_gets_document(as_user, author, document):
    response = as_user(author).get(f"/api/v1/a3/{document.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == str(document.id)
    assert len(body["sections"]) == 8


def test_document_of_other_org_is_404(as_user, engine, outsider, document):
    engine.a3_service.get_document.return_value = None

    response = as_user(outsider).get(f"/api/v1/a3/{document.id}")

    assert response.status_code == 404


def test_non_member_is_403(as_user, colleague, document):
    response = as_user(colleague).get(f"/api/v1/a3/{document.id}")

    assert response.status_code == 403


def test_viewer_cannot_edit(as_user, engine, colleague, document, viewer_of):
    engine.department_service.get_membership.return_value = viewer_of(colleague)

    client = as_user(colleague)
    assert client.get(f"/api/v1/a3/{document.id}").status_code == 200
    response = client.put(
        f"/api/v1/a3/{document.id}/sections/goals", json={"content": "New goal"}
    )

    assert response.status_code == 403
    engine.a3_service.update_section.assert_not_awaited()


def test_user_without_org_gets_400(as_user):
    loner = User(name="Loner", email="loner@x.test")

    response = as_user(loner).post(
        "/api/v1/a3", json={"title": "T", "department_id": str(uuid4())}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "User must belong to an organization"


def test_unknown_section_type_is_400(as_user, author, document):
    response = as_user(author).put(
        f"/api/v1/a3/{document.id}/sections/summary", json={"content": "x"}
    )

    assert response.status_code == 400


def test_invalid_status_transition_is_400(as_user, engine, author, document):
    engine.a3_service.change_status.side_effect = ValueError("Cannot change status from 'draft' to 'completed'")

    response = as_user(author).post(
        f"/api/v1/a3/{document.id}/status", json={"status": "completed"}
    )

    assert response.status_code == 400
    assert "Cannot change status" in response.json()["detail"]


def test_manager_cannot_delete(as_user, engine, colleague, document, manager_of):
    engine.department_service.get_membership.return_value = manager_of(colleague)

    response = as_user(colleague).delete(f"/api/v1/a3/{document.id}")

    assert response.status_code == 403
    engine.a3_service.delete_document.assert_not_awaited()


def test_owner_can_delete(as_user, engine, owner, document):
    response = as_user(owner).delete(f"/api/v1/a3/{document.id}")

    assert response.status_code == 200
    engine.a3_service.delete_document.assert_awaited_once()


def test_chat_failure_is_500(as_user, engine, author, document):
    engine.ai_service.send_message.side_effect = AIResponseError("down")

    response = as_user(author).post(f"/api/v1/a3/{document.id}/chat", json={"content": "Help"})

    assert response.status_code == 500


def test_chat_returns_reply(as_user, engine, author, document, org):
    engine.org_service.get_organization.return_value = org
    engine.ai_service.send_message.return_value = ChatMessage(
        a3_id=document.id, user_id=author.id, role=ChatRole.ASSISTANT, content="Ask why five times."
    )

    response = as_user(author).post(
        f"/api/v1/a3/{document.id}/chat", json={"content": "Help", "section_type": "root_cause"}
    )

    assert response.status_code == 200
    assert response.json()["content"] == "Ask why five times."
    kwargs = engine.ai_service.send_message.await_args.kwargs
    assert kwargs["organization"] is org
    assert kwargs["section_type"].value == "root_cause"


def test_comment_edit_by_other_user_is_403(as_user, engine, owner, document):
    engine.comment_service.get_comment.return_value = Comment(a3_id=document.id, content="x")
    engine.comment_service.edit_comment.side_effect = PermissionError("Only the author can edit a comment")

    response = as_user(owner).patch(
        f"/api/v1/a3/{document.id}/comments/{uuid4()}", json={"content": "changed"}
    )

    assert response.status_code == 403


def test_viewer_cannot_comment(as_user, engine, colleague, document, viewer_of):
    engine.department_service.get_membership.return_value = viewer_of(colleague)

    response = as_user(colleague).post(
        f"/api/v1/a3/{document.id}/comments", json={"content": "Looks good"}
    )

    assert response.status_code == 403


def test_export_pdf(as_user, engine, author, document):
    engine.export_service.export_pdf.return_value = b"%PDF-1.7"

    response = as_user(author).get(f"/api/v1/a3/{document.id}/export/pdf")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="a3-reduce-scrap-on-line-3.pdf"' in response.headers["content-disposition"]
    assert response.content == b"%PDF-1.7"


def test_export_pdf_timeout_is_500(as_user, engine, author, document):
    engine.export_service.export_pdf.side_effect = ExportTimeoutError("slow")

    response = as_user(author).get(f"/api/v1/a3/{document.id}/export/pdf")

    assert response.status_code == 500
    assert response.json()["detail"] == "PDF export timed out"


def test_export_html(as_user, engine, author, document):
    engine.export_service.export_html.return_value = "<html>A3</html>"

    response = as_user(author).get(f"/api/v1/a3/{document.id}/export/html")

    assert response.status_code == 200
    assert response.text == "<html>A3</html>"


def test_api_key_status_is_masked(as_user, engine, owner, org):
    engine.org_service.get_organization.return_value = org

    response = as_user(owner).get("/api/v1/organizations/current/api-key")

    assert response.status_code == 200
    assert response.json() == {"has_api_key": True, "masked_key": "sk-t...7890"}


def test_api_key_requires_owner(as_user, author):
    response = as_user(author).put(
        "/api/v1/organizations/current/api-key", json={"api_key": "sk-test-1234567890"}
    )

    assert response.status_code == 403


def test_department_create_requires_owner(as_user, author):
    response = as_user(author).post("/api/v1/departments", json={"name": "Quality"})

    assert response.status_code == 403


def test_member_management_by_manager(as_user, engine, colleague, author, department, manager_of, member_of):
    engine.department_service.get_department.return_value = department
    engine.department_service.get_membership.return_value = manager_of(colleague)
    engine.department_service.set_member.return_value = member_of(author)

    response = as_user(colleague).put(
        f"/api/v1/departments/{department.id}/members/{author.id}", json={"role": "member"}
    )

    assert response.status_code == 200
    assert response.json()["role"] == "member"


def test_member_management_denied_for_member(as_user, engine, colleague, author, department, member_of):
    engine.department_service.get_department.return_value = department
    engine.department_service.get_membership.return_value = member_of(colleague)

    response = as_user(colleague).put(
        f"/api/v1/departments/{department.id}/members/{author.id}", json={"role": "manager"}
    )

    assert response.status_code == 403


def test_login_failure_is_401(engine):
    engine.users_service.get_user_by_email.return_value = None
    app.dependency_overrides[get_engine] = lambda: engine
    try:
        response = TestClient(app).post(
            "/api/v1/auth/login", json={"email": "nobody@acme.com", "password": "whatever1"}
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 401


def test_readiness_reports_database_down(engine):
    engine.org_storage.ping.return_value = False
    engine.coach_agent.health_check.return_value = True
    app.dependency_overrides[get_engine] = lambda: engine
    try:
        response = TestClient(app).get("/api/v1/health/ready")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    assert response.json()["database"] is False


def test_me_includes_department_roles(as_user, engine, colleague, department, manager_of):
    engine.department_service.list_user_memberships.return_value = [manager_of(colleague)]

    response = as_user(colleague).get("/api/v1/auth/me")

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == colleague.email
    assert len(body["departments"]) == 1
    assert body["departments"][0]["role"] == "manager"
    assert body["departments"][0]["department_id"] == str(department.id)
    engine.department_service.list_user_memberships.assert_awaited_once_with(colleague.id)
