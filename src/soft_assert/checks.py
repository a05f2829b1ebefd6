"""
Soft assertion checks.

Each check takes a Reporter first, calls reporter.helper() so failures are
attributed to the caller, and reports at most one failure. Nothing raised by
the checked values escapes a check.
"""

from __future__ import annotations

import ctypes
import dataclasses
import logging
import re
import types
import weakref
from collections import deque
from collections.abc import Iterable, Mapping
from typing import (
    Any,
    Callable,
    Dict,
    NamedTuple,
    Optional,
    Pattern,
    Protocol,
    Set,
    Tuple,
    runtime_checkable,
)

from soft_assert.reporting.base import Reporter

logger = logging.getLogger(__name__)

_NULLABLE_CDATA = (ctypes.c_void_p, ctypes.c_char_p, ctypes.c_wchar_p)
_REFERENCE_POINTERS = (ctypes._Pointer, ctypes._CFuncPtr)
_UNSET = object()
_IDENTITY_TYPES = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.ModuleType,
    type,
)


@runtime_checkable
class Nullable(Protocol):
    """Capability for user types that can be logically nil."""

    def __is_nil__(self) -> bool: ...


class Recovery(NamedTuple):
    """Outcome of a protected call."""

    panicked: bool
    message: str


# =============================================================================
# Formatting
# =============================================================================


def type_name(value: Any) -> str:
    """Runtime type name, module-qualified outside builtins."""
    cls = type(value)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def _sprint(value: Any) -> str:
    try:
        return str(value)
    except Exception as e:
        return f"<{type_name(value)} object (str() raised {e!r})>"


def _describe(value: Any) -> str:
    return f"({type_name(value)}) {_sprint(value)}"


# =============================================================================
# Nil
# =============================================================================


def is_nil(value: Any) -> bool:
    """
    Report whether value is logically nil.

    None, dead weak references, NULL ctypes pointers and objects whose type
    says so through __is_nil__ are nil. Zero values such as 0, "" or [] are not.
    """
    if value is None:
        return True

    if isinstance(value, weakref.ref):
        return value() is None

    if isinstance(value, _REFERENCE_POINTERS):
        return not value

    if isinstance(value, _NULLABLE_CDATA):
        return value.value is None

    is_nil_method = getattr(type(value), "__is_nil__", None)
    if is_nil_method is not None:
        return bool(is_nil_method(value))

    return False


def nil(reporter: Reporter, got: Any) -> None:
    """Fail when got is not nil."""
    reporter.helper()
    try:
        absent = is_nil(got)
    except Exception as e:
        reporter.error(f"got {_describe(got)} but expect nil: __is_nil__ raised {e!r}")
        return

    if not absent:
        reporter.error(f"got {_describe(got)} but expect nil")


# =============================================================================
# Deep equality
# =============================================================================


def deep_equal(a: Any, b: Any) -> bool:
    """
    Recursive structural equality.

    Values of different exact types are never equal, so 1 and 1.0 or a list
    and a tuple with the same items differ. Containers, dataclasses and plain
    objects are compared member by member; types with their own __eq__ use it.
    """
    return _deep_equal(a, b, set())


def _deep_equal(a: Any, b: Any, visited: Set[Tuple[int, int]]) -> bool:
    if a is None or b is None:
        return a is b

    if type(a) is not type(b):
        return False

    if isinstance(a, (float, complex)):
        return a == b

    if isinstance(a, _IDENTITY_TYPES):
        return a is b

    # Pairs already under comparison are assumed equal, which ends cycles.
    key = (id(a), id(b))
    if key in visited:
        return True

    if isinstance(a, (list, tuple, deque)):
        visited.add(key)
        return len(a) == len(b) and all(
            _deep_equal(x, y, visited) for x, y in zip(a, b)
        )

    if isinstance(a, Mapping):
        visited.add(key)
        return _mapping_equal(a, b, visited)

    if isinstance(a, (set, frozenset)):
        return a == b

    if dataclasses.is_dataclass(a):
        visited.add(key)
        return all(
            _deep_equal(getattr(a, f.name), getattr(b, f.name), visited)
            for f in dataclasses.fields(a)
        )

    if type(a).__eq__ is not object.__eq__:
        return _truth(a == b)

    state_a = _state(a)
    if state_a is not None:
        visited.add(key)
        return _mapping_equal(state_a, _state(b), visited)

    return a == b


def _truth(result: Any) -> bool:
    # Elementwise comparisons (numpy, pandas) return containers of booleans.
    if isinstance(result, bool):
        return result
    reduce_all = getattr(result, "all", None)
    if callable(reduce_all):
        return _truth(reduce_all())
    if isinstance(result, Iterable) and not isinstance(result, (str, bytes)):
        return all(_truth(item) for item in result)
    return bool(result)


def _slot_names(cls: type) -> Tuple[str, ...]:
    slots = cls.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    names = []
    for name in slots:
        if name in ("__dict__", "__weakref__"):
            continue
        if name.startswith("__") and not name.endswith("__"):
            name = f"_{cls.__name__.lstrip('_')}{name}"
        names.append(name)
    return tuple(names)


def _state(obj: Any) -> Optional[Dict[str, Any]]:
    """Instance attributes from __dict__ and every __slots__ in the MRO."""
    slots = [name for cls in type(obj).__mro__ for name in _slot_names(cls)]
    has_dict = hasattr(obj, "__dict__")
    if not slots and not has_dict:
        return None

    state = dict(vars(obj)) if has_dict else {}
    for name in slots:
        state[name] = getattr(obj, name, _UNSET)
    return state


def _mapping_equal(a: Mapping, b: Mapping, visited: Set[Tuple[int, int]]) -> bool:
    if len(a) != len(b):
        return False
    for k, v in a.items():
        if k not in b:
            return False
        if not _deep_equal(v, b[k], visited):
            return False
    return True


def equal(reporter: Reporter, got: Any, expect: Any) -> None:
    """Fail when got and expect are not deeply equal."""
    reporter.helper()
    try:
        same = deep_equal(got, expect)
    except Exception as e:
        logger.debug(f"Comparison of {type_name(got)} and {type_name(expect)} raised {e!r}")
        reporter.error(
            f"got {_describe(got)} but expect {_describe(expect)}: comparison raised {e!r}"
        )
        return

    if not same:
        reporter.error(f"got {_describe(got)} but expect {_describe(expect)}")


# =============================================================================
# Panic
# =============================================================================


def recovery(fn: Callable[[], Any]) -> Recovery:
    """
    Call fn and capture any exception it raises.

    Returns:
        Recovery(False, "") when fn returns, otherwise Recovery(True, message)
        with the exception's text, or its class name when the text is empty.

    Raises:
        KeyboardInterrupt: Re-raised so a run can still be interrupted. This is
            the one exception that escapes a check; every other exception,
            including SystemExit and pytest outcomes, is captured.
    """
    try:
        fn()
    except KeyboardInterrupt:
        raise
    except BaseException as e:
        message = _sprint(e) or type(e).__name__
        logger.debug(f"Recovered from {type(e).__name__}: {message}")
        return Recovery(True, message)
    return Recovery(False, "")


def _compile(pattern: str) -> Optional[Pattern[str]]:
    try:
        return re.compile(pattern)
    except re.error:
        return None


def panics(reporter: Reporter, fn: Callable[[], Any], pattern: str) -> None:
    """
    Fail when fn does not raise or its message does not match pattern.

    Usage:
        panics(check, lambda: int("x"), r"invalid literal")
    """
    reporter.helper()
    regex = _compile(pattern)
    outcome = recovery(fn)
    if regex is None:
        reporter.error("invalid pattern")
    elif not outcome.panicked:
        reporter.error("did not panic")
    else:
        matches(reporter, outcome.message, pattern)


def matches(reporter: Reporter, got: str, pattern: str) -> None:
    """Fail when pattern is invalid or not found anywhere in got."""
    reporter.helper()
    regex = _compile(pattern)
    if regex is None:
        reporter.error("invalid pattern")
    elif regex.search(got) is None:
        reporter.error(f"got {got!r} which does not match {pattern!r}")
