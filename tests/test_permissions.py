"""Tests for A3 and department permission rules."""

from leancoach.services.permissions import (
    can_comment_a3,
    can_delete_a3,
    can_edit_a3,
    can_manage_department,
    can_view_a3,
)


def test_owner_has_full_access(owner, document):
    assert can_view_a3(owner, document)
    assert can_edit_a3(owner, document)
    assert can_comment_a3(owner, document)
    assert can_delete_a3(owner, document)


def test_author_has_full_access_without_membership(author, document):
    assert can_view_a3(author, document)
    assert can_edit_a3(author, document)
    assert can_comment_a3(author, document)
    assert can_delete_a3(author, document)


def test_manager_can_edit_but_not_delete(colleague, document, manager_of):
    m = manager_of(colleague)

    assert can_view_a3(colleague, document, m)
    assert can_edit_a3(colleague, document, m)
    assert can_comment_a3(colleague, document, m)
    assert not can_delete_a3(colleague, document)


def test_member_can_comment_but_not_edit(colleague, document, member_of):
    m = member_of(colleague)

    assert can_view_a3(colleague, document, m)
    assert not can_edit_a3(colleague, document, m)
    assert can_comment_a3(colleague, document, m)


def test_viewer_is_read_only(colleague, document, viewer_of):
    m = viewer_of(colleague)

    assert can_view_a3(colleague, document, m)
    assert not can_edit_a3(colleague, document, m)
    assert not can_comment_a3(colleague, document, m)


def test_non_member_cannot_view(colleague, document):
    assert not can_view_a3(colleague, document)
    assert not can_comment_a3(colleague, document)


def test_membership_of_other_department_is_ignored(colleague, document, org):
    from leancoach.models import Department, DepartmentMembership, DepartmentRole

    other = Department(org_id=org.id, name="Logistics")
    m = DepartmentMembership(user_id=colleague.id, department_id=other.id, role=DepartmentRole.MANAGER)

    assert not can_view_a3(colleague, document, m)
    assert not can_edit_a3(colleague, document, m)


def test_other_organization_is_denied_even_for_owner(outsider, document):
    assert not can_view_a3(outsider, document)
    assert not can_edit_a3(outsider, document)
    assert not can_comment_a3(outsider, document)
    assert not can_delete_a3(outsider, document)


def test_inactive_user_is_denied(author, document):
    author.is_active = False

    assert not can_view_a3(author, document)
    assert not can_delete_a3(author, document)


def test_missing_user_is_denied(document):
    assert not can_view_a3(None, document)


def test_manage_department(owner, colleague, outsider, department, manager_of, member_of):
    assert can_manage_department(owner, department.org_id)
    assert can_manage_department(colleague, department.org_id, manager_of(colleague))
    assert not can_manage_department(colleague, department.org_id, member_of(colleague))
    assert not can_manage_department(colleague, department.org_id)
    assert not can_manage_department(outsider, department.org_id)
