"""Shared fixtures for Lean Coach tests."""

from uuid import uuid4

import pytest

from leancoach.config import Config
from leancoach.models import (
    A3Document,
    A3Section,
    Department,
    DepartmentMembership,
    DepartmentRole,
    Organization,
    SectionType,
    User,
)

# Keep bcrypt fast in tests
Config.PASSWORD_SALT_ROUNDS = 4

TEST_ENCRYPTION_KEY = "0123456789abcdef" * 4


def make_document(org_id, department_id, author_id, title="Reduce scrap on line 3", **contents):
    """A3 with all eight sections; keyword args set section content by type value"""
    document = A3Document(
        org_id=org_id,
        department_id=department_id,
        author_id=author_id,
        title=title,
    )
    document.sections = [
        A3Section(a3_id=document.id, section_type=st, content=contents.get(st.value, ""))
        for st in SectionType
    ]
    return document


@pytest.fixture
def encryption_key(monkeypatch):
    monkeypatch.setenv(Config.API_KEY_ENCRYPTION_KEY_ENV, TEST_ENCRYPTION_KEY)
    return TEST_ENCRYPTION_KEY


@pytest.fixture
def org():
    return Organization(name="Acme Manufacturing", slug="acme-manufacturing")


@pytest.fixture
def owner(org):
    return User(org_id=org.id, name="Olivia Owner", email="owner@acme.test", is_owner=True)


@pytest.fixture
def author(org):
    return User(org_id=org.id, name="Alex Author", email="alex@acme.test")


@pytest.fixture
def colleague(org):
    return User(org_id=org.id, name="Casey Colleague", email="casey@acme.test")


@pytest.fixture
def outsider():
    return User(org_id=uuid4(), name="Other Org", email="someone@other.test", is_owner=True)


@pytest.fixture
def department(org):
    return Department(org_id=org.id, name="Assembly")


@pytest.fixture
def document(org, department, author):
    return make_document(org.id, department.id, author.id)


def membership(user, department, role):
    return DepartmentMembership(user_id=user.id, department_id=department.id, role=role)


@pytest.fixture
def manager_of(department):
    return lambda user: membership(user, department, DepartmentRole.MANAGER)


@pytest.fixture
def member_of(department):
    return lambda user: membership(user, department, DepartmentRole.MEMBER)


@pytest.fixture
def viewer_of(department):
    return lambda user: membership(user, department, DepartmentRole.VIEWER)
