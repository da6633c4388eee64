"""Permission registry: the closed set of known permissions, their bits and dependencies"""

from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bitperm.core.exceptions import (ConfigurationError, PermissionNotFoundError,
                                     RegistryError)

DEFAULT_MAX_BITS = 64

ADMINISTRATOR = "ADMINISTRATOR"
MANAGE_USERS = "MANAGE_USERS"
MANAGE_USERS_EXTENDED = "MANAGE_USERS_EXTENDED"
MANAGE_USER_ROLES = "MANAGE_USER_ROLES"
HIDE_FOLLOWINGS = "HIDE_FOLLOWINGS"
HIDE_POSTS = "HIDE_POSTS"
HIDE_VERIFICATION = "HIDE_VERIFICATION"


class PermissionDefinition(BaseModel):
    """A single named capability occupying one bit of a mask"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    bit: int
    depends_on: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Permissions that must stay held while this one is held",
    )
    description: str = ""

    @property
    def mask(self) -> int:
        return 1 << self.bit

    def __str__(self) -> str:
        return self.name


PermissionRef = Union[PermissionDefinition, str]


class PermissionRegistry:
    """Immutable, validated set of permission definitions"""

    def __init__(
        self,
        definitions: Iterable[PermissionDefinition],
        max_bits: int = DEFAULT_MAX_BITS,
    ):
        self._definitions: tuple = tuple(definitions)
        self.max_bits = max_bits
        self._validate()

        self._by_name: Dict[str, PermissionDefinition] = {
            d.name: d for d in self._definitions
        }
        self._by_bit: Dict[int, PermissionDefinition] = {
            d.bit: d for d in self._definitions
        }

        # Reverse of the dependency table, built once
        dependants: Dict[str, List[str]] = {d.name: [] for d in self._definitions}
        for definition in self._definitions:
            for dependency in definition.depends_on:
                dependants[dependency].append(definition.name)
        self._dependants: Dict[str, FrozenSet[str]] = {
            name: frozenset(names) for name, names in dependants.items()
        }

    def _validate(self) -> None:
        errors: List[str] = []
        names = set()
        bits = set()

        for definition in self._definitions:
            if definition.name in names:
                errors.append(f"duplicate permission name {definition.name}")
            names.add(definition.name)

            if definition.bit < 0:
                errors.append(f"{definition.name} has negative bit {definition.bit}")
            elif definition.bit >= self.max_bits:
                errors.append(
                    f"{definition.name} uses bit {definition.bit}, "
                    f"registry is limited to {self.max_bits} bits"
                )
            if definition.bit in bits:
                errors.append(f"bit {definition.bit} assigned more than once")
            bits.add(definition.bit)

        for definition in self._definitions:
            for dependency in sorted(definition.depends_on):
                if dependency == definition.name:
                    errors.append(f"{definition.name} depends on itself")
                elif dependency not in names:
                    errors.append(
                        f"{definition.name} depends on unknown permission {dependency}"
                    )

        if errors:
            raise RegistryError(errors)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, PermissionDefinition):
            return self._by_name.get(item.name) == item
        return item in self._by_name

    def __iter__(self) -> Iterator[PermissionDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def get_permission(self, name: str) -> Optional[PermissionDefinition]:
        """Case-sensitive lookup; None when the name is not registered"""
        return self._by_name.get(name)

    def get_permission_by_bit(self, bit: int) -> Optional[PermissionDefinition]:
        return self._by_bit.get(bit)

    def resolve(self, permission: PermissionRef) -> Optional[PermissionDefinition]:
        """Resolve a name or definition to this registry's definition"""
        if isinstance(permission, PermissionDefinition):
            registered = self._by_name.get(permission.name)
            return registered if registered == permission else None
        if isinstance(permission, str):
            return self._by_name.get(permission)
        return None

    def require(self, permission: PermissionRef) -> PermissionDefinition:
        """Like resolve, but raise when the permission is unknown"""
        definition = self.resolve(permission)
        if definition is None:
            raise PermissionNotFoundError(str(permission))
        return definition

    def get_all_permissions(self) -> List[str]:
        """All permission names in declaration order"""
        return [d.name for d in self._definitions]

    def dependencies_of(self, permission: PermissionRef) -> FrozenSet[str]:
        definition = self.resolve(permission)
        return definition.depends_on if definition else frozenset()

    def permission_dependants(self, permission: PermissionRef) -> FrozenSet[str]:
        """Every other permission that declares a dependency on this one"""
        definition = self.resolve(permission)
        if definition is None:
            return frozenset()
        return self._dependants[definition.name]

    def to_dict(self) -> dict:
        return {
            "permissions": [
                {
                    "name": d.name,
                    "bit": d.bit,
                    "depends_on": sorted(d.depends_on),
                    "description": d.description,
                }
                for d in self._definitions
            ]
        }


def default_registry(max_bits: int = DEFAULT_MAX_BITS) -> PermissionRegistry:
    """The built-in registry. Bits are persisted in user records: append only."""
    return PermissionRegistry(
        [
            PermissionDefinition(
                name=ADMINISTRATOR,
                bit=0,
                description="Grants every permission",
            ),
            PermissionDefinition(
                name=MANAGE_USERS,
                bit=1,
                description="View users and reset their tags",
            ),
            PermissionDefinition(
                name=MANAGE_USERS_EXTENDED,
                bit=2,
                depends_on=frozenset({MANAGE_USERS}),
                description="Change user verification",
            ),
            PermissionDefinition(
                name=MANAGE_USER_ROLES,
                bit=3,
                depends_on=frozenset({MANAGE_USERS}),
                description="Change user permissions",
            ),
            PermissionDefinition(
                name=HIDE_FOLLOWINGS,
                bit=4,
                description="Hide followers and followings from other users",
            ),
            PermissionDefinition(
                name=HIDE_POSTS,
                bit=5,
                description="Hide posts from non-followers",
            ),
            PermissionDefinition(
                name=HIDE_VERIFICATION,
                bit=6,
                description="Hide the verification badge",
            ),
        ],
        max_bits=max_bits,
    )


def load_registry(path: Path, max_bits: int = DEFAULT_MAX_BITS) -> PermissionRegistry:
    """
    Load a registry from a YAML file

    The file holds a top-level ``permissions`` list whose entries have
    ``name``, ``bit`` and optionally ``depends_on`` and ``description``.

    Raises:
        ConfigurationError: If the file cannot be read or has the wrong shape
        RegistryError: If the definitions are inconsistent
    """
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Cannot read permission registry {path}: {e}",
            {"path": str(path)}
        ) from e

    entries = data.get("permissions") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ConfigurationError(
            f"Permission registry {path} must contain a 'permissions' list",
            {"path": str(path)}
        )

    try:
        definitions = [PermissionDefinition.model_validate(entry) for entry in entries]
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid permission entry in {path}: {e}",
            {"path": str(path)}
        ) from e

    return PermissionRegistry(definitions, max_bits=max_bits)
