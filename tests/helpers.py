"""Reusable test utilities, recording stubs and a small example domain."""

from __future__ import annotations

import abc
import dataclasses
from typing import Protocol, runtime_checkable

from spy_recorder.recorder.spy import SpyDouble
from spy_recorder.recorder.types import CallRecord


class RecordingLogger:
    """In-memory logger capturing log messages and setup calls."""

    def __init__(self):
        self.messages: list[str] = []
        self.setup_calls: list[bool] = []

    def setup(self, verbose: bool) -> None:
        self.setup_calls.append(verbose)

    def log(self, msg: str, *args: object) -> None:
        self.messages.append(msg % args if args else msg)

    def debug(self, msg: str, *args: object) -> None:
        self.messages.append(f"DEBUG:{msg % args if args else msg}")


@dataclasses.dataclass(frozen=True)
class Address:
    street: str
    number: int


class AnalyticsTracker(abc.ABC):
    """Capability interface the example presenter reports events through."""

    @abc.abstractmethod
    def track_screen_view(self) -> None: ...

    @abc.abstractmethod
    def track_address_deletion(self) -> None: ...

    @abc.abstractmethod
    def track_address_highlight(self, address: Address) -> None: ...


@runtime_checkable
class AddressStore(Protocol):
    def fetch_addresses(self, user_id: str, *, limit: int = 10) -> list[Address]: ...

    def delete_address(self, address: Address) -> bool: ...


@dataclasses.dataclass(frozen=True)
class TrackScreenView(CallRecord):
    pass


@dataclasses.dataclass(frozen=True)
class TrackAddressDeletion(CallRecord):
    pass


@dataclasses.dataclass(frozen=True)
class TrackAddressHighlight(CallRecord):
    address: Address


class AnalyticsSpy(SpyDouble, AnalyticsTracker):
    def track_screen_view(self) -> None:
        self._record(TrackScreenView())

    def track_address_deletion(self) -> None:
        self._record(TrackAddressDeletion())

    def track_address_highlight(self, address: Address) -> None:
        self._record(TrackAddressHighlight(address))


class AddressListPresenter:
    """Example system under test receiving its collaborators by injection."""

    def __init__(self, tracker: AnalyticsTracker, store: AddressStore, user_id: str = "user-1") -> None:
        self.tracker = tracker
        self.store = store
        self.user_id = user_id
        self.addresses: list[Address] = []

    def load(self) -> None:
        self.tracker.track_screen_view()
        self.addresses = self.store.fetch_addresses(self.user_id) or []

    def highlight(self, index: int) -> None:
        self.tracker.track_address_highlight(self.addresses[index])

    def delete(self, index: int) -> None:
        address = self.addresses[index]
        if self.store.delete_address(address):
            self.addresses.remove(address)
            self.tracker.track_address_deletion()
