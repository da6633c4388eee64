"""Mask algebra over a permission registry"""

from functools import lru_cache
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional, Union

from bitperm.core.config import Settings, get_settings
from bitperm.core.permissions.registry import (ADMINISTRATOR, PermissionDefinition,
                                               PermissionRef, PermissionRegistry,
                                               default_registry, load_registry)
from bitperm.core.permissions.subject import (own_mask, role_ids, role_masks,
                                              subject_id)
from bitperm.infrastructure.logging import get_logger

logger = get_logger(__name__)


def _is_name_collection(source: Any) -> bool:
    if isinstance(source, (str, bytes, int, Mapping)):
        return False
    return not hasattr(source, "permissions") and isinstance(source, Iterable)


class PermissionEngine:
    """
    Pure permission computations for subjects carrying bitmasks.

    The engine holds no mutable state. Every mutating operation returns a
    new mask for the subject's own record; persisting it is the caller's job.
    """

    def __init__(self, registry: PermissionRegistry):
        self.registry = registry

    def get_permission(self, name: str) -> Optional[PermissionDefinition]:
        return self.registry.get_permission(name)

    def get_all_permissions(self) -> List[str]:
        return self.registry.get_all_permissions()

    def permission_dependants(self, permission: PermissionRef) -> FrozenSet[str]:
        return self.registry.permission_dependants(permission)

    def get_permissions(self, source: Any) -> int:
        """
        Reduce a subject or a sequence of permission names to one mask

        Args:
            source: A subject (own mask plus roles) or an iterable of names

        Returns:
            The combined mask. Unknown names are skipped.
        """
        if _is_name_collection(source):
            return self._names_to_mask(source)

        mask = own_mask(source)
        for role_mask in role_masks(source):
            mask |= role_mask
        return mask

    def _names_to_mask(self, names: Iterable[PermissionRef]) -> int:
        mask = 0
        for name in names:
            definition = self.registry.resolve(name)
            if definition is None:
                logger.debug("unknown_permission_skipped", permission=str(name))
                continue
            mask |= definition.mask
        return mask

    def _is_administrator(self, effective: int) -> bool:
        administrator = self.registry.get_permission(ADMINISTRATOR)
        return administrator is not None and bool(effective & administrator.mask)

    def has_permission(
        self,
        subject: Any,
        permission: Union[PermissionRef, Iterable[PermissionRef]],
        match_any: bool = False,
    ) -> bool:
        """
        Check whether a subject holds one or several permissions

        Args:
            subject: Subject whose own and role masks are combined
            permission: A single permission or a collection of them
            match_any: For collections, succeed if any one is held
                instead of requiring all of them

        Returns:
            True if granted. ADMINISTRATOR grants everything.
        """
        effective = self.get_permissions(subject)

        if self._is_administrator(effective):
            return True

        if isinstance(permission, (str, PermissionDefinition)):
            return self._holds(effective, permission)

        checks = (self._holds(effective, p) for p in permission)
        return any(checks) if match_any else all(checks)

    def _holds(self, mask: int, permission: PermissionRef) -> bool:
        definition = self.registry.resolve(permission)
        if definition is None:
            return False
        return bool(mask & definition.mask)

    def add_permission(self, subject: Any, permission: PermissionRef) -> int:
        """Own mask of the subject with the permission set; roles are untouched"""
        mask = own_mask(subject)
        definition = self.registry.resolve(permission)
        if definition is None:
            logger.warning("add_unknown_permission", permission=str(permission))
            return mask

        new_mask = mask | definition.mask
        logger.debug(
            "permission_added",
            subject_id=subject_id(subject),
            permission=definition.name,
            changed=new_mask != mask,
        )
        return new_mask

    def removal_blockers(self, subject: Any, permission: PermissionRef) -> List[str]:
        """Held dependants that prevent the permission from being removed"""
        dependants = self.permission_dependants(permission)
        return [
            name
            for name in self.registry.get_all_permissions()
            if name in dependants and self.has_permission(subject, name)
        ]

    def remove_permission(self, subject: Any, permission: PermissionRef) -> int:
        """
        Own mask of the subject with the permission cleared

        Removal is refused, and the own mask returned unchanged, while any
        permission depending on it is still held through the own mask or a
        role. Bits granted by roles stay granted either way.
        """
        mask = own_mask(subject)
        definition = self.registry.resolve(permission)
        if definition is None:
            logger.warning("remove_unknown_permission", permission=str(permission))
            return mask

        blockers = self.removal_blockers(subject, definition)
        if blockers:
            logger.info(
                "permission_removal_refused",
                subject_id=subject_id(subject),
                permission=definition.name,
                blocked_by=blockers,
            )
            return mask

        new_mask = mask & ~definition.mask
        logger.debug(
            "permission_removed",
            subject_id=subject_id(subject),
            permission=definition.name,
            changed=new_mask != mask,
        )
        return new_mask

    def set_permission(self, subject: Any, permission: PermissionRef, enabled: bool) -> int:
        """Add or remove a permission depending on a toggle"""
        if enabled:
            return self.add_permission(subject, permission)
        return self.remove_permission(subject, permission)

    def get_permission_list(self, mask_bearer: Any) -> List[str]:
        """Names of the bits set in a mask, in registry order"""
        mask = own_mask(mask_bearer)
        return [d.name for d in self.registry if mask & d.mask]

    def has_role(self, subject: Any, role_id: Any) -> bool:
        return str(role_id) in role_ids(subject)


def build_engine(settings: Settings) -> PermissionEngine:
    if settings.registry_file is not None:
        registry = load_registry(settings.registry_file, max_bits=settings.max_permission_bits)
    else:
        registry = default_registry(max_bits=settings.max_permission_bits)

    logger.debug(
        "permission_registry_loaded",
        source=str(settings.registry_file or "builtin"),
        permissions=len(registry),
    )
    return PermissionEngine(registry)


@lru_cache(maxsize=1)
def get_engine() -> PermissionEngine:
    """The engine for the configured registry, built once per process"""
    return build_engine(get_settings())
