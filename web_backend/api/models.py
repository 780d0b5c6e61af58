"""
Pydantic models for API requests and responses.

These models define the structure of data exchanged between
the frontend and backend API.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


# ============================================================================
# Request Models
# ============================================================================

class ItemFormRequest(BaseModel):
    """Request body for creating or updating an item from form values."""
    form_data: Dict[str, Any] = Field(
        ...,
        description="Form values keyed by field id (see GET /forms/{type})"
    )


# ============================================================================
# Response Models
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="API health status")
    version: str = Field(..., description="API version")
    service: str = Field(..., description="Service name")


class ActionResponse(BaseModel):
    """Outcome of a create, update or delete."""
    success: bool = Field(..., description="Operation success status")
    timestamp: str = Field(..., description="Response timestamp")
    message: str = Field("", description="Success message")
    error: Optional[str] = Field(None, description="Error message if any")
    data: Optional[Dict[str, Any]] = Field(None, description="Submitted payload or result data")


class AdminActionResponse(BaseModel):
    """Outcome of a sync-ssm admin action."""
    action: str = Field(..., description="Admin action name")
    title: str = Field(..., description="Human-readable action title")
    success: bool = Field(..., description="Operation success status")
    message: str = Field(..., description="Plain-text output of the config service")
    timestamp: str = Field(..., description="Response timestamp")


class NotificationResponse(BaseModel):
    """A recorded notification."""
    level: str = Field(..., description="success, danger, warning or info")
    message: str = Field(..., description="Notification text")
    timestamp: str = Field(..., description="When the notification was raised")


class NotificationListResponse(BaseModel):
    """Recorded notifications, oldest first."""
    total: int = Field(..., description="Number of notifications")
    notifications: List[NotificationResponse] = Field(..., description="Notifications")
