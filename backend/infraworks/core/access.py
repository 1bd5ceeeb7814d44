"""
Role hierarchy and the access gate.

WHAT: The Caller value passed into every gated operation, the role-level
comparison, and the requires_role decorator.

WHY: Roles are a total order viewer(1) < manager(2) < admin(3). Every
authorization decision is one integer comparison, so adding a role means
adding a level, not a new branch. The caller is an explicit argument
rather than ambient "current user" state, which keeps services testable
without an HTTP request.

HOW: requires_role wraps an async service method. It finds the `caller`
argument, compares levels, and raises InsufficientPermissionsError before
the wrapped body runs. A rejected call therefore never reaches a DAO.
"""

import functools
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from infraworks.core.exceptions import InsufficientPermissionsError
from infraworks.models.user import ROLE_LEVELS, UserProfile, UserRole

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

RoleLike = Union[UserRole, str]


@dataclass(frozen=True)
class Caller:
    """
    The principal performing an operation, with its resolved profile.

    Attributes:
        uid: Principal id vouched for by the identity provider
        profile: Stored profile, None when the principal has none
    """

    uid: str
    profile: Optional[UserProfile] = None

    @property
    def role(self) -> Optional[str]:
        return self.profile.role if self.profile is not None else None


def role_level(role: Optional[RoleLike]) -> int:
    """
    Integer level of a role.

    Returns:
        1 for viewer, 2 for manager, 3 for admin, 0 for anything else
    """
    if role is None:
        return 0
    value = role.value if isinstance(role, UserRole) else str(role)
    return ROLE_LEVELS.get(value, 0)


def has_role(profile: Optional[UserProfile], required_role: RoleLike) -> bool:
    """
    Check whether a profile meets a required role.

    Args:
        profile: Caller's profile (None for a principal without one)
        required_role: Minimum role

    Returns:
        True iff role_level(profile.role) >= role_level(required_role);
        always False for a missing profile
    """
    if profile is None:
        return False
    return role_level(profile.role) >= role_level(required_role)


def ensure_role(caller: Optional[Caller], required_role: RoleLike, operation: str = "") -> None:
    """
    Raise unless the caller meets required_role.

    Raises:
        InsufficientPermissionsError: caller missing, has no profile, or level too low
    """
    profile = caller.profile if caller is not None else None
    if has_role(profile, required_role):
        return

    required = required_role.value if isinstance(required_role, UserRole) else required_role
    logger.info(
        "Denied %s for %s (role=%s, required=%s)",
        operation or "operation",
        caller.uid if caller is not None else "anonymous",
        caller.role if caller is not None else None,
        required,
    )
    raise InsufficientPermissionsError(
        message=f"{required} role required",
        user_id=caller.uid if caller is not None else None,
        user_role=caller.role if caller is not None else None,
        required_role=required,
    )


def requires_role(required_role: RoleLike) -> Callable[[F], F]:
    """
    Decorator gating an async operation on the caller's role.

    The decorated function must accept a `caller` argument (positional or
    keyword). The check runs before the function body.

    Usage:
        class ProjectService:
            @requires_role(UserRole.MANAGER)
            async def delete_project(self, caller: Caller, project_id: str) -> None:
                ...
    """

    def decorator(func: F) -> F:
        signature = inspect.signature(func)
        if "caller" not in signature.parameters:
            raise TypeError(f"{func.__qualname__} must accept a 'caller' argument")

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            bound = signature.bind_partial(*args, **kwargs)
            ensure_role(bound.arguments.get("caller"), required_role, func.__qualname__)
            return await func(*args, **kwargs)

        wrapper.required_role = required_role  # type: ignore[attr-defined]
        return wrapper  # type: ignore[return-value]

    return decorator
