"""Authorization policy layered on top of the permission engine.

The engine will set or clear any bit it is asked to. The rules about who may
change whose permissions live here, for the admin endpoints to call before
they persist anything.
"""

from typing import Any

from bitperm.core.exceptions import AuthorizationError
from bitperm.core.permissions.engine import PermissionEngine
from bitperm.core.permissions.registry import (ADMINISTRATOR, MANAGE_USER_ROLES,
                                               PermissionRef)
from bitperm.core.permissions.serialization import MaskLike, parse
from bitperm.core.permissions.subject import subject_id
from bitperm.infrastructure.logging import get_logger

logger = get_logger(__name__)

INSUFFICIENT_PERMISSIONS = "You don't have sufficient permissions to perform this action."


class PermissionPolicy:
    """Guards used by admin operations"""

    def __init__(self, engine: PermissionEngine):
        self.engine = engine

    def require(self, actor: Any, permission: PermissionRef) -> None:
        """
        Ensure the actor holds a permission

        Raises:
            AuthorizationError: If the actor lacks the permission
        """
        if self.engine.has_permission(actor, permission):
            return

        logger.info(
            "authorization_denied",
            actor_id=subject_id(actor),
            permission=str(permission),
        )
        raise AuthorizationError(
            INSUFFICIENT_PERMISSIONS,
            cause=f"User lacks the {permission} permission.",
        )

    def check_permission_update(
        self,
        actor: Any,
        target: Any,
        new_permissions: MaskLike,
    ) -> int:
        """
        Validate that the actor may replace the target's own mask

        Args:
            actor: Subject performing the change
            target: Subject whose permissions are being replaced
            new_permissions: The requested own mask for the target

        Returns:
            The parsed mask, ready to persist on the target

        Raises:
            InvalidMaskError: If new_permissions is malformed
            AuthorizationError: If the change is not allowed
        """
        new_mask = parse(new_permissions)

        self.require(actor, MANAGE_USER_ROLES)

        actor_id = subject_id(actor)
        target_id = subject_id(target)
        target_is_admin = self.engine.has_permission(target, ADMINISTRATOR)

        # Administrators can only be edited by themselves
        if target_is_admin and (actor_id is None or actor_id != target_id):
            logger.info(
                "permission_update_denied",
                actor_id=actor_id,
                target_id=target_id,
                reason="target_is_administrator",
            )
            raise AuthorizationError(
                "You cannot change the permissions of this user.",
                cause="User has the ADMINISTRATOR permission.",
            )

        if self.engine.has_permission(new_mask, ADMINISTRATOR) != target_is_admin:
            logger.info(
                "permission_update_denied",
                actor_id=actor_id,
                target_id=target_id,
                reason="administrator_changed",
            )
            raise AuthorizationError(
                "You cannot change the ADMINISTRATOR permission.",
                cause="You cannot change the ADMINISTRATOR permission.",
            )

        logger.info(
            "permission_update_allowed",
            actor_id=actor_id,
            target_id=target_id,
            permissions=self.engine.get_permission_list(new_mask),
        )
        return new_mask
