"""
Tests for access resolution and organization selection.
"""

from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from django.utils import timezone

from apps.accounts.constants import Role
from apps.accounts.models import UserRole
from apps.accounts.services import (
    ACCESS_LOOKUP_NOTICE,
    AccessResolution,
    OrganizationAccessError,
    build_auth_context,
    resolve_access,
    select_organization,
)
from apps.core.exceptions import PersistenceError
from apps.core.gateway import OrganizationMembership, PersistenceGateway
from tests.accounts.factories import (
    OrganizationFactory,
    ProfileFactory,
    SuperAdminRoleFactory,
    UserFactory,
    UserRoleFactory,
)


def membership(org_id: str, role: str = Role.USER) -> OrganizationMembership:
    return OrganizationMembership(organization_id=org_id, organization_name=f"Org {org_id}", user_role=role)


@pytest.mark.django_db
class TestResolveAccess:
    """Tests for resolve_access."""

    def test_super_admin_sees_every_active_organization(self) -> None:
        grant = SuperAdminRoleFactory.create()
        orgs = OrganizationFactory.create_batch(3)
        OrganizationFactory.create(status="inactive")
        # An ordinary membership does not narrow a super admin's view
        UserRoleFactory.create(user=grant.user, organization=orgs[0], role=Role.USER)

        resolution = resolve_access(grant.user_id)

        assert resolution.role == Role.SUPER_ADMIN
        assert {m["organization_id"] for m in resolution.organizations} == {str(o.id) for o in orgs}
        assert {m["user_role"] for m in resolution.organizations} == {Role.SUPER_ADMIN}
        assert resolution.error is None

    def test_role_comes_from_earliest_membership(self) -> None:
        user = UserFactory.create()
        UserRoleFactory.create(user=user, role=Role.USER)
        first = UserRoleFactory.create(user=user, role=Role.ADMIN)
        UserRole.objects.filter(id=first.id).update(created_at=timezone.now() - timedelta(days=1))

        resolution = resolve_access(user.id)

        assert resolution.role == Role.ADMIN
        assert resolution.first_organization["organization_id"] == str(first.organization_id)
        assert len(resolution.organizations) == 2

    def test_no_memberships_is_plain_user(self) -> None:
        user = UserFactory.create()

        resolution = resolve_access(user.id)

        assert resolution.role == Role.USER
        assert resolution.organizations == []
        assert resolution.first_organization is None
        assert resolution.error is None

    def test_lookup_failure_degrades_without_raising(self) -> None:
        gateway = MagicMock(spec=PersistenceGateway)
        gateway.is_super_admin.side_effect = PersistenceError("down")

        resolution = resolve_access("any-user", gateway)

        assert resolution.role == Role.USER
        assert resolution.organizations == []
        assert resolution.error == ACCESS_LOOKUP_NOTICE

    def test_organization_lookup_failure_degrades(self) -> None:
        gateway = MagicMock(spec=PersistenceGateway)
        gateway.is_super_admin.return_value = False
        gateway.get_user_organizations.side_effect = PersistenceError("down")

        resolution = resolve_access("any-user", gateway)

        assert resolution.role == Role.USER
        assert resolution.error == ACCESS_LOOKUP_NOTICE


class TestSelectOrganization:
    """Tests for select_organization."""

    def test_requested_organization_wins(self) -> None:
        resolution = AccessResolution(organizations=[membership("a"), membership("b")])

        assert select_organization(resolution, requested_id="b", default_id="a")["organization_id"] == "b"

    def test_inaccessible_request_raises(self) -> None:
        resolution = AccessResolution(organizations=[membership("a")])

        with pytest.raises(OrganizationAccessError):
            select_organization(resolution, requested_id="z")

    def test_profile_default_used_when_accessible(self) -> None:
        resolution = AccessResolution(organizations=[membership("a"), membership("b")])

        assert select_organization(resolution, default_id="b")["organization_id"] == "b"

    def test_stale_profile_default_falls_back_to_first(self) -> None:
        resolution = AccessResolution(organizations=[membership("a"), membership("b")])

        assert select_organization(resolution, default_id="gone")["organization_id"] == "a"

    def test_nothing_to_select(self) -> None:
        assert select_organization(AccessResolution()) is None


@pytest.mark.django_db
class TestBuildAuthContext:
    """Tests for build_auth_context."""

    def test_selected_membership_sets_role(self) -> None:
        user = UserFactory.create()
        admin_of = UserRoleFactory.create(user=user, role=Role.ADMIN)
        user_of = UserRoleFactory.create(user=user, role=Role.USER)

        context = build_auth_context(user, requested_organization_id=str(user_of.organization_id))

        assert context.organization == user_of.organization
        assert context.role == Role.USER
        assert len(context.organizations) == 2
        assert admin_of.organization_id != user_of.organization_id

    def test_profile_default_organization(self) -> None:
        user = UserFactory.create()
        UserRoleFactory.create(user=user)
        preferred = UserRoleFactory.create(user=user, role=Role.ADMIN)
        ProfileFactory.create(user=user, default_organization=preferred.organization)

        context = build_auth_context(user)

        assert context.organization == preferred.organization
        assert context.role == Role.ADMIN

    def test_super_admin_keeps_role_in_any_organization(self) -> None:
        grant = SuperAdminRoleFactory.create()
        org = OrganizationFactory.create()

        context = build_auth_context(grant.user, requested_organization_id=str(org.id))

        assert context.organization == org
        assert context.role == Role.SUPER_ADMIN
        assert context.is_super_admin

    def test_user_without_memberships_has_no_organization(self) -> None:
        user = UserFactory.create()

        context = build_auth_context(user)

        assert context.organization is None
        assert context.role == Role.USER
        assert context.notice is None

    def test_organization_lookup_failure_degrades_to_user(self) -> None:
        membership = UserRoleFactory.create(role=Role.ADMIN)

        with patch.object(PersistenceGateway, "get", side_effect=PersistenceError("down")):
            context = build_auth_context(membership.user)

        assert context.user == membership.user
        assert context.organization is None
        assert context.role == Role.USER
        assert context.notice == ACCESS_LOOKUP_NOTICE
        assert len(context.organizations) == 1
