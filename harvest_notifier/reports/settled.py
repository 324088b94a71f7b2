"""
Settled outcomes of report sub-operations.

A report builder runs many small sub-operations (balance reads before and
after a run, per-chain lookups). Each one ends up in one of three states:

- Fulfilled(value): the operation completed
- Rejected(reason): the operation raised
- None: the operation never ran or has not finished

Formatting code reads these through project(), which never raises for a
missing or failed outcome. A failed balance read renders as "??" and is
never confused with a legitimate zero balance.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar, Union
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

# Display sentinel for unavailable values
UNAVAILABLE_PLACEHOLDER = "??"

STATUS_FULFILLED = "fulfilled"
STATUS_REJECTED = "rejected"


@dataclass(frozen=True)
class Fulfilled(Generic[T]):
    value: T


@dataclass(frozen=True)
class Rejected:
    reason: Any


SettledOutcome = Optional[Union[Fulfilled, Rejected]]


class _Unavailable:
    """Marker returned by project() when there is no fulfilled value."""

    _instance = None  # type: Optional[_Unavailable]

    def __new__(cls) -> "_Unavailable":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNAVAILABLE"

    def __bool__(self) -> bool:
        return False


UNAVAILABLE = _Unavailable()


def is_unavailable(value: Any) -> bool:
    return value is UNAVAILABLE


def project(outcome: SettledOutcome, fn: Callable[[Any], R]) -> Union[R, _Unavailable]:
    """
    Map the fulfilled value of an outcome, or return UNAVAILABLE.

    Rejected and absent outcomes yield UNAVAILABLE without calling `fn`.
    Errors raised by `fn` itself propagate: a broken mapping is a bug in
    the caller, not a data availability problem.
    """
    if isinstance(outcome, Fulfilled):
        return fn(outcome.value)
    return UNAVAILABLE


def render(
    outcome: SettledOutcome,
    fn: Callable[[Any], str],
    placeholder: str = UNAVAILABLE_PLACEHOLDER
) -> str:
    """project() for display: UNAVAILABLE becomes the placeholder text."""
    value = project(outcome, fn)
    if value is UNAVAILABLE:
        return placeholder
    return value


def settle(fn: Callable[..., T], *args: Any, **kwargs: Any) -> Union[Fulfilled, Rejected]:
    """
    Run a sub-operation and capture how it settled.

    Exceptions become Rejected(reason=exc). BaseException (KeyboardInterrupt,
    SystemExit) still propagates.
    """
    try:
        return Fulfilled(fn(*args, **kwargs))
    except Exception as e:
        logger.warning(
            f"[SETTLE_REJECTED] {getattr(fn, '__name__', repr(fn))} failed | "
            f"error={type(e).__name__}: {e}"
        )
        return Rejected(e)


# =============================================================================
# JSON shape
# =============================================================================

def outcome_to_dict(
    outcome: SettledOutcome,
    encode_value: Callable[[Any], Any] = lambda v: v
) -> Optional[Dict[str, Any]]:
    """
    {"status": "fulfilled", "value": ...} / {"status": "rejected", "reason": "..."} / None
    """
    if isinstance(outcome, Fulfilled):
        return {"status": STATUS_FULFILLED, "value": encode_value(outcome.value)}
    if isinstance(outcome, Rejected):
        reason = outcome.reason
        if isinstance(reason, BaseException):
            reason = f"{type(reason).__name__}: {reason}"
        return {"status": STATUS_REJECTED, "reason": str(reason)}
    return None


def outcome_from_dict(
    data: Optional[Dict[str, Any]],
    decode_value: Callable[[Any], Any] = lambda v: v
) -> SettledOutcome:
    if data is None:
        return None
    status = data.get("status")
    if status == STATUS_FULFILLED:
        return Fulfilled(decode_value(data.get("value")))
    if status == STATUS_REJECTED:
        return Rejected(data.get("reason"))
    raise ValueError(f"Unknown settled outcome status: {status!r}")


__all__ = [
    "UNAVAILABLE",
    "UNAVAILABLE_PLACEHOLDER",
    "Fulfilled",
    "Rejected",
    "SettledOutcome",
    "is_unavailable",
    "project",
    "render",
    "settle",
    "outcome_to_dict",
    "outcome_from_dict",
]
