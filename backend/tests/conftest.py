"""
Shared pytest fixtures for all tests.

Factories
---------
Import factories directly from their modules:

    from tests.accounts.factories import UserFactory, OrganizationFactory, UserRoleFactory
    from tests.grupos.factories import GrupoFactory
    from tests.cpls.factories import CplFactory

Example usage:

    @pytest.mark.django_db
    def test_something():
        org = OrganizationFactory.create()
        membership = UserRoleFactory.create(organization=org, role="admin")
"""

from typing import Any, cast

import pytest
from django.core.cache import cache
from django.http import HttpRequest
from django.test import Client, RequestFactory
from django.test.client import WSGIRequest  # type: ignore[attr-defined]

from apps.accounts.constants import Role
from apps.core.auth import AuthContext
from apps.core.gateway import OrganizationMembership
from apps.core.types import AuthenticatedHttpRequest


class MockRequest(HttpRequest):
    """
    HttpRequest subclass for tests that allows setting auth attribute.

    Example:
        request = MockRequest()
        request.auth = AuthContext(user=user, role="admin", organization=org)
    """

    auth: AuthContext


def make_request_with_auth(request: "WSGIRequest", auth: AuthContext) -> AuthenticatedHttpRequest:
    """
    Set auth on a request and return it typed as AuthenticatedHttpRequest.

    Example:
        request = request_factory.get("/api/v1/grupos")
        request = make_request_with_auth(request, auth_context_for(membership))
    """
    request.auth = auth  # type: ignore[attr-defined]
    return cast(AuthenticatedHttpRequest, request)


def auth_context_for(membership: Any) -> AuthContext:
    """AuthContext acting within a UserRole's organization with its role."""
    org = membership.organization
    return AuthContext(
        user=membership.user,
        role=membership.role,
        organization=org,
        organizations=[
            OrganizationMembership(
                organization_id=str(org.id),
                organization_name=org.name,
                user_role=membership.role,
            )
        ],
    )


@pytest.fixture(autouse=True)
def _clear_cache():
    """Rate-limit buckets and session revocations live in the cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def request_factory() -> RequestFactory:
    """
    Django request factory for unit testing views.

    Use this to call Django Ninja endpoint functions directly.
    """
    return RequestFactory()


@pytest.fixture
def api_client() -> Client:
    """
    Django test client for full HTTP request/response cycle tests.

    Example:
        def test_api_returns_200(api_client):
            response = api_client.get("/api/v1/health")
            assert response.status_code == 200
    """
    return Client()


@pytest.fixture
def admin_membership(db):
    """Admin of a fresh organization."""
    from tests.accounts.factories import UserRoleFactory

    return UserRoleFactory.create(role=Role.ADMIN)


@pytest.fixture
def user_membership(db):
    """Plain user of a fresh organization."""
    from tests.accounts.factories import UserRoleFactory

    return UserRoleFactory.create(role=Role.USER)


@pytest.fixture
def authenticated_request(request_factory: RequestFactory):
    """
    Factory fixture for requests acting as a membership.

    Example:
        def test_list(authenticated_request, admin_membership):
            request = authenticated_request(admin_membership, path="/api/v1/grupos")
            result = list_groups(request)
    """

    def _make_request(
        membership: Any,
        method: str = "get",
        path: str = "/",
        data: dict | None = None,
        content_type: str = "application/json",
    ) -> AuthenticatedHttpRequest:
        method_func = getattr(request_factory, method.lower())
        kwargs: dict[str, Any] = {}
        if data is not None:
            kwargs["data"] = data
            kwargs["content_type"] = content_type
        request = method_func(path, **kwargs)
        return make_request_with_auth(request, auth_context_for(membership))

    return _make_request
