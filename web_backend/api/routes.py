"""
API routes for the Web Console backend.

Exposes REST endpoints for the console sections, entity forms and
CRUD operations, K4 keys and the sync-ssm admin actions.
"""

import logging
from typing import Dict, Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from consolectl.constants import SSM_ACTIONS, TYPE_MAPPING

from .models import (
    ActionResponse,
    AdminActionResponse,
    HealthCheckResponse,
    ItemFormRequest,
    NotificationListResponse,
)
from .dependencies import get_service
from ..services.console_service import ConsoleService
from ..config import settings

logger = logging.getLogger(__name__)

# Create API router
router = APIRouter()


def _check_type(type: str) -> None:
    if type not in TYPE_MAPPING:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": f"Unknown type: {type}"}
        )


def _raise_on_failure(result: Dict[str, Any]) -> Dict[str, Any]:
    if not result.get("success"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result)
    return result


# ============================================================================
# Health Check Endpoint
# ============================================================================

@router.get(
    "/health",
    response_model=HealthCheckResponse,
    tags=["Health"],
    summary="Health check endpoint"
)
async def health_check() -> HealthCheckResponse:
    """
    Check if the API is running and healthy.

    Returns:
        HealthCheckResponse: API health status
    """
    return HealthCheckResponse(
        status="healthy",
        version=settings.app_version,
        service=settings.app_name
    )


# ============================================================================
# Read Operations
# ============================================================================

@router.get(
    "/sections/{section}",
    tags=["Sections"],
    summary="Load a console section",
    response_description="Section items and rendered view"
)
async def list_section(
    section: str,
    service: ConsoleService = Depends(get_service)
) -> Dict[str, Any]:
    """
    Load the items of a console section (e.g. `device-groups`,
    `network-slices`, `gnb-inventory`, `upf-inventory`, `k4-keys`).

    **Example Response:**
    ```json
    {
      "timestamp": "2025-01-15 10:30:00 UTC",
      "section": "gnb-inventory",
      "total": 1,
      "items": [{"name": "gnb-1", "tac": 1}],
      "view": "# gNB Inventory ..."
    }
    ```
    """
    logger.info(f"Loading section {section}")
    result = await service.list_section(section)

    if "error" in result:
        logger.error(f"Error loading section {section}: {result['error']}")
        code = (
            status.HTTP_404_NOT_FOUND
            if result["error"].startswith("Unknown section")
            else status.HTTP_502_BAD_GATEWAY
        )
        raise HTTPException(status_code=code, detail=result)

    return result


@router.get(
    "/subscribers",
    tags=["Subscribers"],
    summary="List subscribers (paginated)"
)
async def list_subscribers(
    page: int = Query(1, ge=1, description="Page number"),
    limit: Optional[int] = Query(None, ge=1, le=500, description="Page size"),
    q: str = Query("", description="Free-text search"),
    ue_id: str = Query("", description="Filter by UE ID"),
    plmn_id: str = Query("", description="Filter by PLMN ID"),
    service: ConsoleService = Depends(get_service)
) -> Dict[str, Any]:
    """List subscribers with search filters and pagination metadata."""
    result = await service.list_subscribers(page=page, limit=limit, q=q, ue_id=ue_id, plmn_id=plmn_id)

    if "error" in result:
        logger.error(f"Error listing subscribers: {result['error']}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result)

    return result


@router.get(
    "/forms/{type}",
    tags=["Forms"],
    summary="Describe a create or edit form"
)
async def get_form(
    type: str,
    item_id: Optional[str] = Query(None, description="Item to edit; omit for the create form"),
    service: ConsoleService = Depends(get_service)
) -> Dict[str, Any]:
    """
    Describe the fields of an entity form. With `item_id` the current
    values of that item are included.
    """
    _check_type(type)
    return _raise_on_failure(await service.get_form(type, item_id))


@router.get(
    "/items/{type}/{item_id}",
    tags=["Items"],
    summary="Get one item"
)
async def get_item(
    type: str,
    item_id: str,
    service: ConsoleService = Depends(get_service)
) -> Dict[str, Any]:
    """Get one entity document by type tag and identity."""
    _check_type(type)
    result = await service.get_item(type, item_id)

    if not result.get("success"):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result)

    return result


@router.get(
    "/notifications",
    response_model=NotificationListResponse,
    tags=["Notifications"],
    summary="Recorded notifications"
)
async def get_notifications(
    drain: bool = Query(False, description="Clear notifications after reading"),
    service: ConsoleService = Depends(get_service)
) -> NotificationListResponse:
    """Return the notifications raised by console actions, oldest first."""
    items = await service.get_notifications(drain=drain)
    return NotificationListResponse(total=len(items), notifications=items)


# ============================================================================
# Write Operations
# ============================================================================

@router.post(
    "/items/{type}",
    response_model=ActionResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Items"],
    summary="Create an item"
)
async def create_item(
    type: str,
    request: ItemFormRequest,
    service: ConsoleService = Depends(get_service)
) -> Dict[str, Any]:
    """
    Create an entity from form values.

    Validation errors are returned with status 400, one message per line
    in `error`.
    """
    _check_type(type)
    logger.info(f"Creating {type}")
    return _raise_on_failure(await service.create_item(type, request.form_data))


@router.put(
    "/items/{type}/{item_id}",
    response_model=ActionResponse,
    tags=["Items"],
    summary="Update an item"
)
async def update_item(
    type: str,
    item_id: str,
    request: ItemFormRequest,
    service: ConsoleService = Depends(get_service)
) -> Dict[str, Any]:
    """Update an entity. Fields not in `form_data` keep their stored values."""
    _check_type(type)
    logger.info(f"Updating {type} {item_id}")
    return _raise_on_failure(await service.update_item(type, item_id, request.form_data))


@router.delete(
    "/items/{type}/{item_id}",
    response_model=ActionResponse,
    tags=["Items"],
    summary="Delete an item"
)
async def delete_item(
    type: str,
    item_id: str,
    service: ConsoleService = Depends(get_service)
) -> Dict[str, Any]:
    """Delete an entity. K4 keys are resolved to their label first."""
    _check_type(type)
    logger.info(f"Deleting {type} {item_id}")
    return _raise_on_failure(await service.delete_item(type, item_id))


@router.delete(
    "/k4-keys/{k4_sno}/{key_label}",
    response_model=ActionResponse,
    tags=["K4 Keys"],
    summary="Delete a K4 key by serial number and label"
)
async def delete_k4_key(
    k4_sno: int,
    key_label: str,
    service: ConsoleService = Depends(get_service)
) -> Dict[str, Any]:
    logger.info(f"Deleting K4 key {k4_sno}/{key_label}")
    return _raise_on_failure(await service.delete_k4_key(k4_sno, key_label))


@router.post(
    "/admin/{action}",
    response_model=AdminActionResponse,
    tags=["Admin"],
    summary="Run a sync-ssm admin action"
)
async def run_admin_action(
    action: str,
    service: ConsoleService = Depends(get_service)
) -> Dict[str, Any]:
    """
    Run `sync-key`, `check-k4-life` or `k4-rotation`.

    The config service's plain-text output is returned as `message`;
    a failed action answers 502.
    """
    if action not in SSM_ACTIONS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": f"Unknown admin action: {action}"}
        )

    result = await service.run_admin_action(action)
    if not result["success"]:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result)
    return result
