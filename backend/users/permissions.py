"""
Role capabilities.

Service operations that are role-gated receive the caller's capabilities as a
plain ``frozenset`` of strings, so pricing and lifecycle code can be exercised
without a request or a user. The DRF permission classes below gate the HTTP
endpoints with the same map.
"""

import logging

from rest_framework import permissions

from .models import User

logger = logging.getLogger(__name__)

CREATE_ORDERS = "orders.create"
PREPARE_ORDERS = "orders.prepare"
APPLY_MANUAL_DISCOUNT = "discounts.manual"
APPLY_BUNDLE_DISCOUNT = "discounts.bundle"
MANAGE_TABLES = "tables.manage"
SETTLE_PAYMENTS = "payments.settle"

ROLE_CAPABILITIES = {
    User.Role.OWNER: frozenset(
        {
            CREATE_ORDERS,
            PREPARE_ORDERS,
            APPLY_MANUAL_DISCOUNT,
            APPLY_BUNDLE_DISCOUNT,
            MANAGE_TABLES,
            SETTLE_PAYMENTS,
        }
    ),
    User.Role.SUPERVISOR: frozenset(
        {
            CREATE_ORDERS,
            PREPARE_ORDERS,
            APPLY_MANUAL_DISCOUNT,
            APPLY_BUNDLE_DISCOUNT,
            MANAGE_TABLES,
            SETTLE_PAYMENTS,
        }
    ),
    # Floor staff may only apply the discounts that come with a bundle purchase
    User.Role.FLOOR_STAFF: frozenset(
        {
            CREATE_ORDERS,
            PREPARE_ORDERS,
            APPLY_BUNDLE_DISCOUNT,
            MANAGE_TABLES,
            SETTLE_PAYMENTS,
        }
    ),
    User.Role.KITCHEN_STAFF: frozenset({PREPARE_ORDERS}),
}


def capabilities_for(user) -> frozenset:
    """Return the capability set for a user, empty for anonymous or inactive users."""
    if user is None or not getattr(user, "is_authenticated", False):
        return frozenset()
    if not user.is_active:
        return frozenset()
    return ROLE_CAPABILITIES.get(user.role, frozenset())


class HasCapability(permissions.BasePermission):
    """
    Grants access when the user holds ``required_capability``.

    Subclass and set ``required_capability``; views may also declare
    ``required_capabilities`` as a dict of action name to capability.
    """

    required_capability = None

    def has_permission(self, request, view):
        capability = self.required_capability
        action_map = getattr(view, "required_capabilities", None)
        if action_map is not None:
            capability = action_map.get(getattr(view, "action", None), capability)
        if capability is None:
            return bool(request.user and request.user.is_authenticated)

        allowed = capability in capabilities_for(request.user)
        if not allowed:
            logger.info(
                "Denied %s to user %s (role=%s)",
                capability,
                getattr(request.user, "pk", None),
                getattr(request.user, "role", None),
            )
        return allowed


class CanCreateOrders(HasCapability):
    required_capability = CREATE_ORDERS


class CanManageTables(HasCapability):
    required_capability = MANAGE_TABLES


class CanSettlePayments(HasCapability):
    required_capability = SETTLE_PAYMENTS
