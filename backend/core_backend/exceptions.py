"""
Error taxonomy for the order core.

Every service operation reports failures by raising one of the classes below.
Business-rule errors are recoverable and carry enough detail for the caller to
retry with corrected input. ``StorageUnavailableError`` is the one fatal
category and sits on its own branch so it is never mistaken for a rule
violation.

The DRF exception handler at the bottom renders these as JSON responses.
"""

import functools
import logging

from django.db import InterfaceError, OperationalError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class POSError(Exception):
    """Base exception for order core errors."""

    code = "pos_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "The request could not be completed."

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def as_dict(self):
        payload = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = {key: str(value) for key, value in self.details.items()}
        return payload


class BusinessRuleError(POSError):
    """Recoverable, caller-facing rule violation."""

    code = "business_rule"
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidInputError(BusinessRuleError):
    """Malformed or out-of-range request data."""

    code = "invalid_input"
    default_message = "The request contains invalid data."


class InvalidReferenceError(BusinessRuleError):
    """Raised when a referenced table, menu item, order or item does not exist."""

    code = "invalid_reference"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity, identifier, message=None):
        if message is None:
            message = f"{entity} '{identifier}' was not found."
        super().__init__(message, entity=entity, id=identifier)


class InvalidTransitionError(BusinessRuleError):
    """Raised on a status graph violation."""

    code = "invalid_transition"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, entity, current, requested, message=None):
        if message is None:
            message = f"Cannot transition {entity} from {current} to {requested}."
        super().__init__(message, current=current, requested=requested)


class ItemNotRemovableError(BusinessRuleError):
    """Raised when removing an item that has already been sent to preparation."""

    code = "item_not_removable"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, item, message=None):
        if message is None:
            message = (
                f"Item '{item.menu_item.name}' is {item.status} and can no longer be removed."
            )
        super().__init__(message, item_id=item.pk, status=item.status)


class OrderClosedError(BusinessRuleError):
    """Raised when mutating a PAID or CANCELLED order."""

    code = "order_closed"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, order, message=None):
        if message is None:
            message = f"Order #{order.order_number} is {order.status} and cannot be modified."
        super().__init__(message, order_id=order.pk, status=order.status)


class AlreadyPaidError(BusinessRuleError):
    code = "already_paid"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, order, message=None):
        if message is None:
            message = f"Order #{order.order_number} has already been paid."
        super().__init__(message, order_id=order.pk)


class InsufficientTablesError(BusinessRuleError):
    code = "insufficient_tables"
    default_message = "At least two tables are required to merge."


class AlreadyMergedError(BusinessRuleError):
    code = "already_merged"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, table, message=None):
        if message is None:
            message = f"Table {table.number} is already part of a merged group."
        super().__init__(message, table_id=table.pk)


class UnauthorizedError(BusinessRuleError):
    """Raised when the caller lacks the capability an operation requires."""

    code = "unauthorized"
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, capability, message=None):
        if message is None:
            message = f"This action requires the '{capability}' permission."
        super().__init__(message, capability=capability)


class StorageUnavailableError(POSError):
    """The persistence layer could not be reached or rejected the connection."""

    code = "storage_unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "The order database is currently unavailable."


def storage_guard(func):
    """
    Convert database connectivity failures into StorageUnavailableError.

    Apply outside ``transaction.atomic`` so the failed block has already rolled
    back by the time the error is translated.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as exc:
            logger.error("Storage failure in %s: %s", func.__qualname__, exc)
            raise StorageUnavailableError() from exc

    return wrapper


def pos_exception_handler(exc, context):
    """
    DRF exception handler that renders POSError subclasses as
    ``{"error": ..., "code": ...}`` and defers everything else to DRF.
    """
    if isinstance(exc, POSError):
        view = context.get("view")
        logger.info(
            "%s raised %s: %s",
            view.__class__.__name__ if view else "request",
            exc.__class__.__name__,
            exc.message,
        )
        return Response(exc.as_dict(), status=exc.status_code)

    return exception_handler(exc, context)
