"""
Factories for accounts and organizations models.

Used in tests to create test data.
"""

import factory
from factory.django import DjangoModelFactory

from apps.accounts.constants import Role
from apps.accounts.models import Profile, User, UserRole
from apps.organizations.models import Organization


class UserFactory(DjangoModelFactory):
    """Factory for User model."""

    class Meta:
        model = User

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    is_active = True
    is_staff = False
    password = factory.PostGenerationMethodCall("set_password", "correct-horse")


class OrganizationFactory(DjangoModelFactory):
    """Factory for Organization model."""

    class Meta:
        model = Organization

    name = factory.Sequence(lambda n: f"Organización {n}")
    status = Organization.Status.ACTIVE


class UserRoleFactory(DjangoModelFactory):
    """Factory for organization memberships."""

    class Meta:
        model = UserRole

    user = factory.SubFactory(UserFactory)
    organization = factory.SubFactory(OrganizationFactory)
    role = Role.USER


class SuperAdminRoleFactory(DjangoModelFactory):
    """Global super_admin grant (no organization)."""

    class Meta:
        model = UserRole

    user = factory.SubFactory(UserFactory)
    organization = None
    role = Role.SUPER_ADMIN


class ProfileFactory(DjangoModelFactory):
    """Factory for Profile model."""

    class Meta:
        model = Profile

    user = factory.SubFactory(UserFactory)
    nombre = factory.Sequence(lambda n: f"Usuario {n}")
    vinculado = False
