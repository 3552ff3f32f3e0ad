"""Event bus contracts.

Services depend on ``IEventBus`` only; the concrete in-memory bus lives
in ``shared.infrastructure.bus`` and is injected (or defaulted) at
construction time.
"""

from __future__ import annotations

from typing import Protocol, Type, TypeVar

from shared.domain.events import DomainEvent

E = TypeVar("E", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol[E]):
    """Something that reacts to one kind of domain event."""

    def handle(self, event: E) -> None: ...


class IEventBus(Protocol):
    """Publishes events to every handler subscribed to their exact type."""

    def publish(self, event: DomainEvent) -> None: ...

    def subscribe(self, event_class: Type[E], handler: IEventHandler[E]) -> None: ...
