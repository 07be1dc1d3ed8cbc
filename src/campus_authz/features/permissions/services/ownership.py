"""Ownership fallback registry.

Resource families register how to tell whether a principal owns one of
their instances. Resources with no registered rule answer False.
"""

import inspect
from typing import Awaitable, Callable, Dict, Mapping, Optional, Union

from loguru import logger


OwnershipRule = Callable[[str, str], Union[bool, Awaitable[bool]]]
"""``rule(principal_id, resource_instance_id) -> bool`` (sync or async)."""


class OwnershipRegistry:
    """OwnershipChecker that dispatches to per-resource rules."""

    def __init__(self, rules: Optional[Mapping[str, OwnershipRule]] = None):
        self._rules: Dict[str, OwnershipRule] = dict(rules or {})

    def register(self, resource: str, rule: OwnershipRule) -> None:
        """Register the ownership rule of a resource family, replacing any previous one."""
        self._rules[resource] = rule
        logger.debug(f"Registered ownership rule for resource '{resource}'")

    def unregister(self, resource: str) -> None:
        self._rules.pop(resource, None)

    def is_registered(self, resource: str) -> bool:
        return resource in self._rules

    async def check(
        self,
        principal_id: str,
        resource: str,
        resource_instance_id: str
    ) -> bool:
        """Check if the principal owns the instance. Never raises."""
        rule = self._rules.get(resource)
        if rule is None:
            logger.warning(f"Ownership check not implemented for resource type: {resource}")
            return False

        try:
            result = rule(principal_id, resource_instance_id)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.error(
                f"Error checking ownership for principal {principal_id} "
                f"on {resource} {resource_instance_id}: {e}"
            )
            return False

        return result is True
