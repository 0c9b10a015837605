"""
Organization services - super-admin tenant management.
"""

from apps.core.gateway import PersistenceGateway
from apps.core.logging import get_logger
from apps.organizations.models import Organization
from apps.organizations.schemas import OrganizationCreate

logger = get_logger(__name__)


def list_organizations(gateway: PersistenceGateway | None = None) -> list[Organization]:
    """Every organization regardless of status, newest first."""
    gateway = gateway or PersistenceGateway()
    return gateway.select("organizations", order=["-created_at"])


def create_organization(
    data: OrganizationCreate,
    gateway: PersistenceGateway | None = None,
) -> Organization:
    """Create an active organization."""
    gateway = gateway or PersistenceGateway()
    organization = gateway.insert(
        "organizations",
        {
            "name": data.name,
            "status": Organization.Status.ACTIVE,
            "whatsapp_api_key": data.whatsapp_api_key,
            "whatsapp_phone_number": data.whatsapp_phone_number,
        },
    )
    logger.info("organization_created", organization_id=str(organization.id), name=organization.name)
    return organization
