"""
Domain API endpoints
CRUD plus the public lookup of a host name's config
"""

from fastapi import APIRouter, Depends, Response, status

from domain_config.api.deps import (
    Pagination,
    get_domain_service,
    get_pagination,
    require_admin_for_writes
)
from domain_config.core.exceptions import NotFoundError, ValidationError
from domain_config.schemas.common import PaginationInfo
from domain_config.schemas.config import ConfigResponse
from domain_config.schemas.domain import (
    DomainCreate,
    DomainEnvelope,
    DomainListResponse,
    DomainLookupEnvelope,
    DomainResponse,
    DomainUpdate
)
from domain_config.models.domain import Domain
from domain_config.services.domain_service import DomainService, extract_domain

router = APIRouter(
    prefix="/domains",
    tags=["domains"],
    dependencies=[Depends(require_admin_for_writes)]
)


def _to_response(domain: Domain) -> DomainResponse:
    return DomainResponse(
        id=domain.id,
        domain=domain.domain,
        homepage=domain.homepage,
        config_id=domain.config_id,
        config=ConfigResponse.model_validate(domain.config) if domain.config else None,
        created_at=domain.created_at,
        updated_at=domain.updated_at
    )


def _not_found(domain_id: int) -> NotFoundError:
    return NotFoundError(f"Domain with id {domain_id} not found", "DOMAIN_NOT_FOUND")


@router.get("", response_model=DomainListResponse)
async def list_domains(
    pagination: Pagination = Depends(get_pagination),
    service: DomainService = Depends(get_domain_service)
):
    """
    List domains with their configs, newest first

    Returns:
        DomainListResponse: One page of domains with pagination info
    """
    domains, total = service.list(pagination.page, pagination.page_size)

    return DomainListResponse(
        data=[_to_response(domain) for domain in domains],
        pagination=PaginationInfo(
            page=pagination.page,
            page_size=pagination.page_size,
            total=total,
            total_pages=pagination.total_pages(total)
        )
    )


# Must be declared before the catch-all lookup route
@router.get("/id/{domain_id}", response_model=DomainEnvelope)
async def get_domain_by_id(
    domain_id: int,
    service: DomainService = Depends(get_domain_service)
):
    domain = service.get_by_id(domain_id)
    if domain is None:
        raise _not_found(domain_id)

    return DomainEnvelope(data=_to_response(domain))


@router.get("/{domain:path}", response_model=DomainLookupEnvelope)
async def lookup_domain(
    domain: str,
    service: DomainService = Depends(get_domain_service)
):
    """
    Resolve a host name (or full URL) to its config

    Falls back to the root domain when there is no exact match:
    www.example.com -> example.com

    Args:
        domain: Host name or URL

    Returns:
        DomainLookupEnvelope: domain, homepage and config

    Raises:
        ValidationError: 400 if no host name is given
        NotFoundError: 404 if neither the host nor its root domain is registered
    """
    if not extract_domain(domain):
        raise ValidationError("Domain is required")

    lookup = service.get_by_domain(domain)
    if lookup is None:
        raise NotFoundError(f"No config found for domain '{domain}'", "DOMAIN_NOT_FOUND")

    return DomainLookupEnvelope(data=lookup)


@router.post("", response_model=DomainEnvelope, status_code=status.HTTP_201_CREATED)
async def create_domain(
    payload: DomainCreate,
    service: DomainService = Depends(get_domain_service)
):
    """
    Register a domain

    Raises:
        ConflictError: 409 if the domain already exists
        NotFoundError: 404 if the config does not exist
    """
    domain = service.create(payload.model_dump())
    return DomainEnvelope(data=_to_response(domain))


@router.put("/{domain_id}", response_model=DomainEnvelope)
async def update_domain(
    domain_id: int,
    payload: DomainUpdate,
    service: DomainService = Depends(get_domain_service)
):
    """
    Update a domain

    Only fields present in the body change; homepage may be cleared with null.

    Raises:
        ValidationError: 400 if the body has no fields
        NotFoundError: 404 if the domain or the new config does not exist
        ConflictError: 409 if renamed onto an existing domain
    """
    data = payload.model_dump(exclude_unset=True)
    if not data:
        raise ValidationError("At least one field must be provided")

    domain = service.update(domain_id, data)
    if domain is None:
        raise _not_found(domain_id)

    return DomainEnvelope(data=_to_response(domain))


@router.delete("/{domain_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_domain(
    domain_id: int,
    service: DomainService = Depends(get_domain_service)
):
    service.delete(domain_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
