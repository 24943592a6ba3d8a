"""
GardenGrid Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the error scenarios the API reports.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers in main.py map them to JSON responses.
Who:   Raised by the layout core and the services; caught by global handlers.

Exception Hierarchy:
    GardenGridError (base)
    ├── ValidationError              → 400 Bad Request (client can fix)
    │   └── PlacementError           → 400 (out of bounds / overlap)
    ├── NotFoundError                → 404 Not Found (also: not owned)
    ├── ResizeConfirmationRequired   → 409 Conflict (resize would drop plants)
    └── CatalogLoadError             → raised at startup only

Persistence failures are not wrapped: SQLAlchemy exceptions propagate out of
the services unchanged and are turned into a generic 500 at the HTTP edge.
"""

from typing import Any, Dict, List, Optional


class GardenGridError(Exception):
    """
    Base exception for all GardenGrid application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional detail; returned as `details` for 4xx responses
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GardenGridError):
    """
    Raised when client input fails a business rule.

    When:    Non-positive dimensions, a bed larger than its garden, a malformed
             position, an unknown catalog plant.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class PlacementError(ValidationError):
    """
    Raised when a footprint cannot be placed in its container.

    `reason` is "out_of_bounds" or "overlap". For overlaps, `conflict`
    holds the (x, y, w, h) of the first occupant hit.
    """

    OUT_OF_BOUNDS = "out_of_bounds"
    OVERLAP = "overlap"

    def __init__(
        self,
        message: str,
        reason: str,
        conflict: Optional[Dict[str, int]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["reason"] = reason
        if conflict is not None:
            ctx["conflict"] = conflict
        super().__init__(message=message, context=ctx)
        self.reason = reason
        self.conflict = conflict


class NotFoundError(GardenGridError):
    """
    Raised when a resource does not exist or does not belong to the caller.

    Both cases produce the same message so responses never reveal whether
    another owner's garden, bed or plant exists.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class ResizeConfirmationRequired(GardenGridError):
    """
    Raised when shrinking a bed would drop plants and the caller has not
    confirmed the loss.

    Nothing is written. The client shows `dropped_plant_ids` to the user and
    repeats the request with confirmDrop=true.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        dropped_plant_ids: List[int],
        context: Optional[Dict[str, Any]] = None,
    ):
        count = len(dropped_plant_ids)
        message = (
            f"Resizing this bed removes {count} plant{'s' if count != 1 else ''} "
            "that no longer fit. Repeat the request with confirmDrop=true to proceed."
        )
        ctx = context or {}
        ctx["dropped_plant_ids"] = list(dropped_plant_ids)
        super().__init__(message=message, context=ctx)
        self.dropped_plant_ids = list(dropped_plant_ids)


class CatalogLoadError(GardenGridError):
    """Raised when the plant catalog seed file cannot be read or parsed."""

    def __init__(
        self,
        message: str = "Plant catalog could not be loaded",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
