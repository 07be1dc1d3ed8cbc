"""Permission grant value object.

A grant is a ``(resource, action)`` pair reachable from a principal's roles.
The flat permission set of a principal is a frozenset of grants.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Union

from ....config.constants import WILDCARD, PermissionAction
from ....core.exceptions import CacheSerializationError


ActionLike = Union[PermissionAction, str]

FlatPermissionSet = FrozenSet["PermissionGrant"]


def normalize_action(action: ActionLike) -> str:
    """Return the plain string value of an action.

    Enum members hash by name, so they are reduced to their value before
    being stored in or looked up from a set.
    """
    if isinstance(action, Enum):
        return str(action.value)
    return str(action)


@dataclass(frozen=True)
class PermissionGrant:
    """Immutable ``(resource, action)`` grant."""

    resource: str
    action: str

    def __post_init__(self):
        if not self.resource:
            raise ValueError("Grant resource must be non-empty")
        object.__setattr__(self, "action", normalize_action(self.action))
        if not self.action:
            raise ValueError("Grant action must be non-empty")

    @property
    def is_wildcard(self) -> bool:
        """Check if either side of the grant is the wildcard sentinel."""
        return self.resource == WILDCARD or self.action == WILDCARD

    def to_dict(self) -> Dict[str, str]:
        return {"resource": self.resource, "action": self.action}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PermissionGrant":
        return cls(resource=data["resource"], action=data["action"])

    def __str__(self) -> str:
        return f"{self.resource}:{self.action}"


def grants_to_payload(grants: Iterable[PermissionGrant]) -> List[Dict[str, str]]:
    """Serialize grants to a list of ``{resource, action}`` objects, sorted for stable output."""
    return [grant.to_dict() for grant in sorted(grants, key=lambda g: (g.resource, g.action))]


def grants_from_payload(payload: Any) -> FlatPermissionSet:
    """Rebuild a flat permission set from its serialized list form."""
    if not isinstance(payload, list):
        raise CacheSerializationError(
            "Cached permission set must be a list",
            details={"type": type(payload).__name__}
        )
    try:
        return frozenset(PermissionGrant.from_dict(item) for item in payload)
    except (KeyError, TypeError, ValueError) as e:
        raise CacheSerializationError(f"Invalid cached permission entry: {e}") from e
