"""Action hierarchy table.

Declares which coarse actions imply which finer actions. The table is an
immutable value handed to the decision engine at construction time.
Expansion is a single lookup: implications are not chained.
"""

from types import MappingProxyType
from typing import FrozenSet, Iterable, Iterator, Mapping, Tuple

from ....config.constants import WILDCARD, PermissionAction
from ....core.exceptions import ConfigurationError
from .grant import ActionLike, normalize_action


class HierarchyTable(Mapping[str, FrozenSet[str]]):
    """Immutable mapping ``coarse action -> frozenset of implied actions``."""

    __slots__ = ("_table",)

    def __init__(self, mapping: Mapping[ActionLike, Iterable[ActionLike]]):
        table = {}
        for coarse, implied in mapping.items():
            coarse_value = normalize_action(coarse)
            implied_values = frozenset(normalize_action(action) for action in implied)

            if coarse_value == WILDCARD or WILDCARD in implied_values:
                raise ConfigurationError(
                    "The wildcard sentinel cannot appear in the action hierarchy",
                    details={"action": coarse_value}
                )
            if coarse_value in implied_values:
                raise ConfigurationError(
                    f"Action '{coarse_value}' cannot imply itself",
                    details={"action": coarse_value}
                )
            table[coarse_value] = implied_values

        self._table = MappingProxyType(table)

    def __getitem__(self, action: ActionLike) -> FrozenSet[str]:
        return self._table[normalize_action(action)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def implied_by(self, action: ActionLike) -> FrozenSet[str]:
        """Actions implied by ``action``; empty for actions not in the table."""
        return self._table.get(normalize_action(action), frozenset())

    def implies(self, coarse: ActionLike, action: ActionLike) -> bool:
        """One-hop check whether ``coarse`` implies ``action``."""
        return normalize_action(action) in self.implied_by(coarse)

    def coarse_actions_for(self, action: ActionLike) -> Tuple[str, ...]:
        """Coarse actions whose expansion contains ``action``."""
        value = normalize_action(action)
        return tuple(coarse for coarse, implied in self._table.items() if value in implied)

    def __repr__(self) -> str:
        entries = ", ".join(f"{coarse}->{len(implied)}" for coarse, implied in self._table.items())
        return f"HierarchyTable({entries})"


# MANAGE implies every finer action except DELETE
DEFAULT_HIERARCHY = HierarchyTable({
    PermissionAction.MANAGE: (
        PermissionAction.CREATE,
        PermissionAction.READ,
        PermissionAction.UPDATE,
        PermissionAction.APPROVE,
        PermissionAction.REJECT,
        PermissionAction.VIEW_REPORTS,
        PermissionAction.DOWNLOAD_DATA,
        PermissionAction.EXPORT,
        PermissionAction.IMPORT,
        PermissionAction.ARCHIVE,
        PermissionAction.RESTORE,
        PermissionAction.PUBLISH,
        PermissionAction.UNPUBLISH,
        PermissionAction.ASSIGN,
        PermissionAction.TRANSFER,
    ),
})
