"""Build spy classes automatically from an interface definition."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from spy_recorder.recorder.spy import SpyDouble
from spy_recorder.recorder.types import Call

InterfaceT = TypeVar("InterfaceT")

_RESERVED_NAMES = frozenset(name for name in dir(SpyDouble) if not name.startswith("_")) | {"recorder"}


def public_operations(interface: type) -> dict[str, Callable[..., Any]]:
    """Return the public plain methods of ``interface`` keyed by name.

    Static methods, class methods and properties are not operations on an
    instance and are left untouched.
    """

    operations: dict[str, Callable[..., Any]] = {}
    for name in dir(interface):
        if name.startswith("_"):
            continue
        attr = inspect.getattr_static(interface, name)
        if inspect.isfunction(attr):
            operations[name] = attr
    return operations


def _bound_arguments(signature: inspect.Signature, spy: SpyDouble, args: tuple, kwargs: dict) -> tuple:
    bound = signature.bind(spy, *args, **kwargs)
    bound.apply_defaults()
    # First entry is the instance itself.
    return tuple(bound.arguments.items())[1:]


def _recording_method(name: str, function: Callable[..., Any], class_name: str) -> Callable[..., Any]:
    signature = inspect.signature(function)

    if inspect.iscoroutinefunction(function):

        async def method(self: SpyDouble, *args: Any, **kwargs: Any) -> Any:
            return self._record(Call(name, _bound_arguments(signature, self, args, kwargs)))

    else:

        def method(self: SpyDouble, *args: Any, **kwargs: Any) -> Any:
            return self._record(Call(name, _bound_arguments(signature, self, args, kwargs)))

    method.__name__ = name
    method.__qualname__ = f"{class_name}.{name}"
    method.__doc__ = function.__doc__
    method.__signature__ = signature  # type: ignore[attr-defined]
    return method


def spy_for(interface: type[InterfaceT], *, name: str | None = None) -> type[InterfaceT]:
    """Return a spy class recording a :class:`Call` for every public method.

    Positional and keyword invocations are bound to the interface signature
    before recording, so ``highlight(address)`` and
    ``highlight(address=address)`` produce equal records. The returned class
    subclasses both :class:`SpyDouble` and ``interface``.
    """

    if not isinstance(interface, type):
        raise TypeError(f"spy_for expects a class, got {interface!r}")

    operations = public_operations(interface)
    clashes = sorted(_RESERVED_NAMES & operations.keys())
    if clashes:
        raise TypeError(f"{interface.__name__} defines methods reserved by SpyDouble: {clashes}")

    class_name = name or f"{interface.__name__}Spy"
    namespace: dict[str, Any] = {
        op_name: _recording_method(op_name, function, class_name) for op_name, function in operations.items()
    }
    namespace["__module__"] = interface.__module__
    namespace["__doc__"] = f"Recording spy for {interface.__qualname__}."

    metaclass = type(interface)
    return metaclass(class_name, (SpyDouble, interface), namespace)
