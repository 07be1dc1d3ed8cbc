"""
Decision engine - the allow/deny function of the authorization core.

``evaluate`` is pure: it reads only its arguments and the hierarchy table
given at construction. ``decide`` adds the optional ownership fallback,
which is the only rule that may perform I/O.
"""
from typing import AbstractSet, Iterable, Optional

from loguru import logger

from ....config.constants import WILDCARD, DEFAULT_ELEVATED_ROLE_LABELS
from ..entities import (
    ActionLike,
    Decision,
    DecisionOptions,
    DenyReason,
    HierarchyTable,
    MatchRule,
    OwnershipChecker,
    PermissionGrant,
    Principal,
    DEFAULT_HIERARCHY,
    normalize_action,
)


class DecisionEngine:
    """
    Applies the authorization rules in order, stopping at the first match:

    1. bypass for elevated role labels (when enabled)
    2. direct ``(resource, action)`` grant
    3. a ``(resource, coarse)`` grant whose coarse action implies ``action``
    4. wildcard grants ``(*, *)``, ``(*, action)``, ``(resource, *)``
    5. ownership fallback (``decide`` only, when opted in)
    6. deny
    """

    def __init__(
        self,
        hierarchy: HierarchyTable = DEFAULT_HIERARCHY,
        elevated_labels: Iterable[str] = DEFAULT_ELEVATED_ROLE_LABELS
    ):
        self._hierarchy = hierarchy
        self._elevated_labels = frozenset(elevated_labels)

    @property
    def hierarchy(self) -> HierarchyTable:
        return self._hierarchy

    def is_elevated(self, principal: Principal) -> bool:
        """Check if the principal's role label is in the bypass set."""
        return principal.role_label is not None and principal.role_label in self._elevated_labels

    def evaluate(
        self,
        principal: Principal,
        resource: str,
        action: ActionLike,
        grants: AbstractSet[PermissionGrant],
        options: Optional[DecisionOptions] = None
    ) -> Decision:
        """Evaluate rules 1 to 4 against a resolved flat permission set."""
        options = options or DecisionOptions()
        action_value = normalize_action(action)

        if options.bypass_enabled and self.is_elevated(principal):
            return Decision.allow(MatchRule.BYPASS)

        if not resource or not action_value:
            return Decision.deny(self._reason(principal, resource, action_value))

        if PermissionGrant(resource, action_value) in grants:
            return Decision.allow(MatchRule.DIRECT)

        for coarse in self._hierarchy.coarse_actions_for(action_value):
            if PermissionGrant(resource, coarse) in grants:
                return Decision.allow(MatchRule.HIERARCHY)

        wildcard_grants = (
            PermissionGrant(WILDCARD, WILDCARD),
            PermissionGrant(WILDCARD, action_value),
            PermissionGrant(resource, WILDCARD),
        )
        if any(grant in grants for grant in wildcard_grants):
            return Decision.allow(MatchRule.WILDCARD)

        return Decision.deny(self._reason(principal, resource, action_value))

    async def decide(
        self,
        principal: Principal,
        resource: str,
        action: ActionLike,
        grants: AbstractSet[PermissionGrant],
        options: Optional[DecisionOptions] = None,
        ownership: Optional[OwnershipChecker] = None,
        resource_instance_id: Optional[str] = None
    ) -> Decision:
        """Evaluate all rules including the ownership fallback."""
        options = options or DecisionOptions()
        decision = self.evaluate(principal, resource, action, grants, options)
        if decision.granted:
            return decision

        if not options.ownership_check_enabled or not resource_instance_id:
            return decision

        if ownership is None:
            logger.warning(f"Ownership check requested for '{resource}' but no ownership checker is configured")
            return decision

        try:
            is_owner = await ownership.check(principal.id, resource, resource_instance_id)
        except Exception as e:
            logger.error(
                f"Error checking ownership for principal {principal.id} "
                f"on {resource} {resource_instance_id}: {e}"
            )
            return decision

        if is_owner is True:
            return Decision.allow(MatchRule.OWNERSHIP)
        return decision

    @staticmethod
    def _reason(principal: Principal, resource: str, action: str) -> DenyReason:
        return DenyReason(resource=resource, action=action, principal_id=principal.id)
