"""
Config CRUD API endpoints
Reads are public; writes need an admin session
"""

from fastapi import APIRouter, Depends, Response, status

from domain_config.api.deps import (
    Pagination,
    get_config_service,
    get_pagination,
    require_admin_for_writes
)
from domain_config.core.exceptions import NotFoundError, ValidationError
from domain_config.schemas.common import PaginationInfo
from domain_config.schemas.config import (
    ConfigCreate,
    ConfigEnvelope,
    ConfigListResponse,
    ConfigResponse,
    ConfigUpdate
)
from domain_config.services.config_service import ConfigService

router = APIRouter(
    prefix="/configs",
    tags=["configs"],
    dependencies=[Depends(require_admin_for_writes)]
)


def _not_found(config_id: int) -> NotFoundError:
    return NotFoundError(f"Config with id {config_id} not found", "CONFIG_NOT_FOUND")


@router.get("", response_model=ConfigListResponse)
async def list_configs(
    pagination: Pagination = Depends(get_pagination),
    service: ConfigService = Depends(get_config_service)
):
    """
    List configs, newest first

    Args:
        pagination: page and pageSize query parameters

    Returns:
        ConfigListResponse: One page of configs with pagination info
    """
    configs, total = service.list(pagination.page, pagination.page_size)

    return ConfigListResponse(
        data=[ConfigResponse.model_validate(config) for config in configs],
        pagination=PaginationInfo(
            page=pagination.page,
            page_size=pagination.page_size,
            total=total,
            total_pages=pagination.total_pages(total)
        )
    )


@router.get("/{config_id}", response_model=ConfigEnvelope)
async def get_config(
    config_id: int,
    service: ConfigService = Depends(get_config_service)
):
    config = service.get_by_id(config_id)
    if config is None:
        raise _not_found(config_id)

    return ConfigEnvelope(data=ConfigResponse.model_validate(config))


@router.post("", response_model=ConfigEnvelope, status_code=status.HTTP_201_CREATED)
async def create_config(
    payload: ConfigCreate,
    service: ConfigService = Depends(get_config_service)
):
    """
    Create a new config

    Args:
        payload: title, author, description, keywords, links, permissions

    Returns:
        ConfigEnvelope: Created config
    """
    config = service.create(payload.model_dump())
    return ConfigEnvelope(data=ConfigResponse.model_validate(config))


@router.put("/{config_id}", response_model=ConfigEnvelope)
async def replace_config(
    config_id: int,
    payload: ConfigCreate,
    service: ConfigService = Depends(get_config_service)
):
    """
    Replace every field of a config

    Fields missing from the body are cleared.

    Raises:
        NotFoundError: 404 if the config does not exist
    """
    config = service.update(config_id, payload.model_dump())
    if config is None:
        raise _not_found(config_id)

    return ConfigEnvelope(data=ConfigResponse.model_validate(config))


@router.patch("/{config_id}", response_model=ConfigEnvelope)
async def update_config(
    config_id: int,
    payload: ConfigUpdate,
    service: ConfigService = Depends(get_config_service)
):
    """
    Update only the fields present in the body

    Raises:
        ValidationError: 400 if the body has no fields
        NotFoundError: 404 if the config does not exist
    """
    data = payload.model_dump(exclude_unset=True)
    if not data:
        raise ValidationError("At least one field must be provided")

    config = service.update(config_id, data)
    if config is None:
        raise _not_found(config_id)

    return ConfigEnvelope(data=ConfigResponse.model_validate(config))


@router.delete("/{config_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_config(
    config_id: int,
    service: ConfigService = Depends(get_config_service)
):
    """
    Delete a config

    Raises:
        ConflictError: 409 if domains still use the config
        NotFoundError: 404 if the config does not exist
    """
    service.delete(config_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
