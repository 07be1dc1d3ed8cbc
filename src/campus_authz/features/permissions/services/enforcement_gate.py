"""
Enforcement gate - the boundary entry point of the authorization core.

Resolves a principal's flat permission set (cache first, store on miss),
runs the decision engine and returns a Proceed or Deny outcome. Infrastructure
faults are caught here and never reach callers as exceptions.
"""
import asyncio
from typing import Iterable, Optional

from loguru import logger

from ....config.constants import CacheTTL, DenyCause, Timeouts
from ....core.exceptions import CacheTimeoutError, PermissionCacheError, PermissionStoreError
from ..entities import (
    ActionLike,
    Deny,
    DenyReason,
    DecisionOptions,
    FlatPermissionSet,
    MatchRule,
    OwnershipChecker,
    Outcome,
    PermissionCache,
    PermissionStore,
    Principal,
    Proceed,
    normalize_action,
)
from .decision_engine import DecisionEngine


class EnforcementGate:
    """
    Authorization service other subsystems call directly.

    Failure policy:
    - cache read failure or timeout: logged, treated as a miss (fail open to the store)
    - cache write failure: logged, the decision is still made
    - store failure or timeout: logged, deny (fail closed)
    """

    def __init__(
        self,
        store: PermissionStore,
        cache: PermissionCache,
        engine: Optional[DecisionEngine] = None,
        ownership: Optional[OwnershipChecker] = None,
        cache_ttl_seconds: int = CacheTTL.PERMISSIONS,
        cache_timeout: float = Timeouts.CACHE_OPERATION,
        store_timeout: float = Timeouts.STORE_QUERY
    ):
        self.store = store
        self.cache = cache
        self.engine = engine or DecisionEngine()
        self.ownership = ownership
        self.cache_ttl_seconds = cache_ttl_seconds
        self.cache_timeout = cache_timeout
        self.store_timeout = store_timeout

    async def authorize(
        self,
        principal: Optional[Principal],
        resource: str,
        action: ActionLike,
        options: Optional[DecisionOptions] = None,
        resource_instance_id: Optional[str] = None
    ) -> Outcome:
        """Decide whether ``principal`` may perform ``action`` on ``resource``."""
        options = options or DecisionOptions()
        action_value = normalize_action(action)

        if principal is None or not principal.is_authenticated:
            return self._deny(None, resource, action_value, DenyCause.UNAUTHENTICATED)

        try:
            # Elevated labels need no I/O
            if options.bypass_enabled and self.engine.is_elevated(principal):
                return Proceed(rule=MatchRule.BYPASS)

            grants = await self.resolve_permissions(principal.id)
            decision = await self.engine.decide(
                principal,
                resource,
                action_value,
                grants,
                options=options,
                ownership=self.ownership,
                resource_instance_id=resource_instance_id,
            )
        except PermissionStoreError as e:
            logger.error(f"Permission store failure while authorizing principal {principal.id}: {e.message}")
            return self._deny(principal.id, resource, action_value, DenyCause.PERMISSION_CHECK_FAILED)
        except Exception as e:
            logger.exception(f"Error in permission check for principal {principal.id}: {e}")
            return self._deny(principal.id, resource, action_value, DenyCause.PERMISSION_CHECK_FAILED)

        if decision.granted:
            logger.debug(
                f"Access granted to principal {principal.id} for {resource}:{action_value} "
                f"by rule {decision.rule.value}"
            )
            return Proceed(rule=decision.rule)

        return self._deny(principal.id, resource, action_value, DenyCause.INSUFFICIENT_PERMISSIONS)

    async def has_role(
        self,
        principal: Optional[Principal],
        role_names: Iterable[str],
        bypass_enabled: bool = True
    ) -> Outcome:
        """Check that the principal holds at least one of the named roles."""
        required = sorted(set(role_names))
        requirement = ",".join(required)

        if principal is None or not principal.is_authenticated:
            return self._deny(None, "role", requirement, DenyCause.UNAUTHENTICATED)

        if bypass_enabled and self.engine.is_elevated(principal):
            return Proceed(rule=MatchRule.BYPASS)

        try:
            roles = await self._with_store_timeout(self.store.get_user_roles(principal.id), "get user roles")
        except PermissionStoreError as e:
            logger.error(f"Permission store failure in role check for principal {principal.id}: {e.message}")
            return self._deny(principal.id, "role", requirement, DenyCause.PERMISSION_CHECK_FAILED)
        except Exception as e:
            logger.exception(f"Error in role check for principal {principal.id}: {e}")
            return self._deny(principal.id, "role", requirement, DenyCause.PERMISSION_CHECK_FAILED)

        held = {role.name for role in roles}
        if held.intersection(required):
            return Proceed(rule=MatchRule.ROLE)
        return self._deny(principal.id, "role", requirement, DenyCause.INSUFFICIENT_PERMISSIONS)

    async def resolve_permissions(self, principal_id: str) -> FlatPermissionSet:
        """Get the principal's flat permission set from the cache, or the store on a miss.

        Raises PermissionStoreError when the store cannot answer.
        """
        cached = await self._cache_get(principal_id)
        if cached is not None:
            return cached

        grants = await self._with_store_timeout(self.store.resolve(principal_id), "resolve permissions")
        await self._cache_put(principal_id, grants)
        return grants

    async def invalidate(self, principal_id: str) -> None:
        """Drop the cached permission set of a principal.

        Must be called by anything that changes the principal's roles or the
        permissions of one of its roles. Raises PermissionCacheError on failure.
        """
        try:
            await asyncio.wait_for(self.cache.invalidate(principal_id), timeout=self.cache_timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Timed out invalidating permission cache for principal {principal_id}")
            raise CacheTimeoutError(
                "Permission cache invalidation timed out",
                details={"principal_id": principal_id}
            ) from e
        except PermissionCacheError as e:
            logger.error(f"Failed to invalidate permission cache for principal {principal_id}: {e.message}")
            raise
        logger.info(f"Invalidated permission cache for principal {principal_id}")

    invalidate_permission_cache = invalidate

    async def _cache_get(self, principal_id: str) -> Optional[FlatPermissionSet]:
        try:
            return await asyncio.wait_for(self.cache.get(principal_id), timeout=self.cache_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Permission cache read timed out for principal {principal_id}, falling back to store")
        except PermissionCacheError as e:
            logger.warning(f"Permission cache read failed for principal {principal_id}, falling back to store: {e.message}")
        except Exception as e:
            logger.warning(f"Permission cache read failed for principal {principal_id}, falling back to store: {e}")
        return None

    async def _cache_put(self, principal_id: str, grants: FlatPermissionSet) -> None:
        try:
            await asyncio.wait_for(
                self.cache.put(principal_id, grants, self.cache_ttl_seconds),
                timeout=self.cache_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"Permission cache write timed out for principal {principal_id}")
        except PermissionCacheError as e:
            logger.warning(f"Failed to cache permissions for principal {principal_id}: {e.message}")
        except Exception as e:
            logger.warning(f"Failed to cache permissions for principal {principal_id}: {e}")

    async def _with_store_timeout(self, coro, operation: str):
        try:
            return await asyncio.wait_for(coro, timeout=self.store_timeout)
        except asyncio.TimeoutError as e:
            raise PermissionStoreError(
                f"Permission store timed out during {operation}",
                details={"timeout": self.store_timeout}
            ) from e

    def _deny(
        self,
        principal_id: Optional[str],
        resource: Optional[str],
        action: Optional[str],
        cause: DenyCause
    ) -> Deny:
        reason = DenyReason(resource=resource, action=action, principal_id=principal_id)
        logger.bind(
            principal_id=principal_id,
            resource=resource,
            action=action,
            cause=cause.value,
        ).info(f"Access denied to principal {principal_id} for {resource}:{action} ({cause.value})")
        return Deny(reason=reason, cause=cause)
