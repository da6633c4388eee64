"""Role/permission bitmask engine"""

from bitperm.core.permissions.engine import PermissionEngine, build_engine, get_engine
from bitperm.core.permissions.policy import PermissionPolicy
from bitperm.core.permissions.registry import (ADMINISTRATOR, HIDE_FOLLOWINGS,
                                               HIDE_POSTS, HIDE_VERIFICATION,
                                               MANAGE_USER_ROLES, MANAGE_USERS,
                                               MANAGE_USERS_EXTENDED,
                                               PermissionDefinition,
                                               PermissionRegistry,
                                               default_registry, load_registry)
from bitperm.core.permissions.serialization import parse, to_string
from bitperm.core.permissions.subject import MaskBearer, Role, RoleBearer, Subject

__all__ = [
    "ADMINISTRATOR",
    "HIDE_FOLLOWINGS",
    "HIDE_POSTS",
    "HIDE_VERIFICATION",
    "MANAGE_USER_ROLES",
    "MANAGE_USERS",
    "MANAGE_USERS_EXTENDED",
    "MaskBearer",
    "PermissionDefinition",
    "PermissionEngine",
    "PermissionPolicy",
    "PermissionRegistry",
    "Role",
    "RoleBearer",
    "Subject",
    "build_engine",
    "default_registry",
    "get_engine",
    "load_registry",
    "parse",
    "to_string",
]
