"""
Principal value object.

Identity of the calling actor, created by the authentication layer.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Principal:
    """
    Immutable identity of an authenticated caller.

    ``role_label`` is the coarse tag carried by the credential (for example
    ``"admin"``). It is independent of the fine-grained roles held in the
    permission store and is only consulted for bypass.
    """
    id: Optional[str]
    role_label: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        """Check if the principal carries a usable identity."""
        return self.id is not None and self.id != ""

    def __str__(self) -> str:
        return f"principal:{self.id}"
