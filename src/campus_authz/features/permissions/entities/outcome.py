"""
Decision and outcome value objects.

Immutable types for the result of a decision engine evaluation and the
tagged Proceed/Deny outcome returned by the enforcement gate.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from ....config.constants import DenyCause, ErrorCode


class MatchRule(str, Enum):
    """Engine rule that produced a decision."""
    BYPASS = "bypass"
    DIRECT = "direct"
    HIERARCHY = "hierarchy"
    WILDCARD = "wildcard"
    OWNERSHIP = "ownership"
    ROLE = "role"
    NONE = "none"


@dataclass(frozen=True)
class DecisionOptions:
    """Per-call switches for the decision engine."""
    bypass_enabled: bool = True
    ownership_check_enabled: bool = False


@dataclass(frozen=True)
class DenyReason:
    """Structured deny metadata for callers to embed in their own errors."""
    resource: Optional[str]
    action: Optional[str]
    principal_id: Optional[str]
    error_code: str = ErrorCode.AUTH_INSUFFICIENT_PERMISSIONS.value

    def to_payload(self) -> Dict[str, Any]:
        """Get the wire form of the deny payload."""
        return {
            "errorCode": self.error_code,
            "resource": self.resource,
            "action": self.action,
            "principalId": self.principal_id,
        }


@dataclass(frozen=True)
class Decision:
    """Result of evaluating the engine rules for a single request."""
    granted: bool
    rule: MatchRule = MatchRule.NONE
    reason: Optional[DenyReason] = None

    @classmethod
    def allow(cls, rule: MatchRule) -> "Decision":
        return cls(granted=True, rule=rule)

    @classmethod
    def deny(cls, reason: DenyReason) -> "Decision":
        return cls(granted=False, rule=MatchRule.NONE, reason=reason)


@dataclass(frozen=True)
class Proceed:
    """The call may continue."""
    rule: MatchRule = MatchRule.NONE

    @property
    def allowed(self) -> bool:
        return True

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Deny:
    """
    The call must stop.

    ``cause`` records why the gate denied and is meant for logs only. The
    payload has the same shape whatever the cause, so callers cannot tell an
    unauthenticated request from an infrastructure failure.
    """
    reason: DenyReason
    cause: DenyCause = field(default=DenyCause.INSUFFICIENT_PERMISSIONS, compare=False)

    @property
    def allowed(self) -> bool:
        return False

    def __bool__(self) -> bool:
        return False

    def to_payload(self) -> Dict[str, Any]:
        return self.reason.to_payload()


Outcome = Union[Proceed, Deny]
