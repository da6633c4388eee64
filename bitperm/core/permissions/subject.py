"""Subjects: user-like entities carrying their own mask plus role masks.

The engine does not depend on any persistence type. Anything exposing a
``permissions`` field (and optionally ``roles``) can be passed in, whether
an ORM row, a session payload dict or one of the models below.
"""

from typing import (Any, Iterable, List, Mapping, Optional, Protocol, Sequence,
                    Union, runtime_checkable)

from pydantic import BaseModel, Field, field_validator

from bitperm.core.permissions.serialization import MaskLike, parse, to_string


@runtime_checkable
class MaskBearer(Protocol):
    """Anything exposing a decimal-string permission mask"""

    permissions: MaskLike


@runtime_checkable
class RoleBearer(MaskBearer, Protocol):
    """A mask bearer that also carries attached roles"""

    roles: Sequence[MaskBearer]


def _normalize_mask(value: MaskLike) -> str:
    return to_string(parse(value))


class Role(BaseModel):
    """A named bundle of permissions attached to subjects"""

    id: Optional[Union[int, str]] = None
    name: str = ""
    permissions: str = "0"

    @field_validator("permissions", mode="before")
    @classmethod
    def normalize_permissions(cls, v: Any) -> str:
        return _normalize_mask(v)


class Subject(BaseModel):
    """A user as seen by the permission engine"""

    id: Optional[Union[int, str]] = None
    tag: Optional[str] = None
    permissions: str = "0"
    roles: List[Role] = Field(default_factory=list)

    @field_validator("permissions", mode="before")
    @classmethod
    def normalize_permissions(cls, v: Any) -> str:
        return _normalize_mask(v)

    def with_permissions(self, mask: int) -> "Subject":
        """Copy of this subject with its own mask replaced"""
        return self.model_copy(update={"permissions": to_string(mask)})


def _field(source: Any, name: str, default: Any = None) -> Any:
    if isinstance(source, Mapping):
        return source.get(name, default)
    return getattr(source, name, default)


def own_mask(source: Any) -> int:
    """The mask stored directly on a subject (or role, or any mask bearer)"""
    if isinstance(source, (int, str)):
        return parse(source)
    value = _field(source, "permissions")
    if value is None:
        return 0
    return parse(value)


def role_masks(source: Any) -> List[int]:
    """Masks of every role attached to a subject, empty when it has none"""
    if isinstance(source, (int, str)):
        return []
    roles: Optional[Iterable[Any]] = _field(source, "roles")
    return [own_mask(role) for role in roles or ()]


def role_ids(source: Any) -> List[str]:
    roles: Optional[Iterable[Any]] = _field(source, "roles")
    return [str(_field(role, "id")) for role in roles or () if _field(role, "id") is not None]


def subject_id(source: Any) -> Optional[str]:
    value = _field(source, "id")
    return None if value is None else str(value)
