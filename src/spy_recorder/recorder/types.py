"""Call records and the read-only call log handed out by recorders."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, ClassVar, overload

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


class CallRecord:
    """One observable operation on a double, carrying its exact arguments.

    Each operation is a frozen dataclass subclass whose fields are the
    arguments of that operation::

        @dataclasses.dataclass(frozen=True)
        class TrackAddressHighlight(CallRecord):
            address: Address

    Dataclass equality compares the concrete class first, so two records are
    equal only when both the case and every argument match. The case tag
    defaults to the snake_case class name and can be pinned with an explicit
    ``operation_tag`` class attribute.
    """

    operation_tag: ClassVar[str] = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "operation_tag" not in cls.__dict__:
            cls.operation_tag = _snake_case(cls.__name__)

    @property
    def operation(self) -> str:
        """Tag of the operation this record stands for."""
        return self.operation_tag

    def argument_items(self) -> tuple[tuple[str, Any], ...]:
        """Return ``(name, value)`` pairs for the recorded arguments."""
        if not dataclasses.is_dataclass(self):
            return ()
        return tuple((field.name, getattr(self, field.name)) for field in dataclasses.fields(self))


@dataclasses.dataclass(frozen=True)
class Call(CallRecord):
    """Generic record produced by auto spies.

    Arguments are stored sorted by parameter name so records built from a
    bound signature and records built with :meth:`of` compare equal.
    """

    name: str
    arguments: tuple[tuple[str, Any], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(sorted(self.arguments, key=lambda item: item[0])))

    @classmethod
    def of(cls, name: str, /, **arguments: Any) -> Call:
        """Build the expected record for ``name(**arguments)``."""
        return cls(name, tuple(arguments.items()))

    @property
    def operation(self) -> str:
        return self.name

    def argument_items(self) -> tuple[tuple[str, Any], ...]:
        return self.arguments

    def __repr__(self) -> str:
        rendered = ", ".join(f"{key}={value!r}" for key, value in self.arguments)
        return f"Call.of({self.name!r}{', ' if rendered else ''}{rendered})"


def operation_tag_of(operation: str | type[CallRecord]) -> str:
    """Normalise an operation given as a tag or a record class to its tag."""
    if isinstance(operation, str):
        return operation
    if operation is Call:
        raise TypeError("Call has no fixed operation; pass the operation name as a string")
    if isinstance(operation, type) and issubclass(operation, CallRecord):
        return operation.operation_tag
    raise TypeError(f"expected an operation tag or CallRecord subclass, got {operation!r}")


class CallLog(Sequence[CallRecord]):
    """Immutable snapshot of the calls recorded by a double, in call order.

    A log compares equal to any list, tuple or other log holding equal records
    in the same order.
    """

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[CallRecord] = ()) -> None:
        self._records: tuple[CallRecord, ...] = tuple(records)

    @overload
    def __getitem__(self, index: int) -> CallRecord: ...

    @overload
    def __getitem__(self, index: slice) -> CallLog: ...

    def __getitem__(self, index: int | slice) -> CallRecord | CallLog:
        if isinstance(index, slice):
            return CallLog(self._records[index])
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[CallRecord]:
        return iter(self._records)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CallLog):
            return self._records == other._records
        if isinstance(other, (list, tuple)):
            return self._records == tuple(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"CallLog({list(self._records)!r})"

    def operations(self) -> list[str]:
        """Return the operation tags in call order."""
        return [record.operation for record in self._records]

    def of_operation(self, operation: str | type[CallRecord]) -> CallLog:
        """Return the sub-log holding only calls to ``operation``."""
        tag = operation_tag_of(operation)
        return CallLog(record for record in self._records if record.operation == tag)
