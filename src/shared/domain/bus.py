"""Ports for publishing domain events inside the process.

Handlers are structural: any object with a ``handle(event)`` method fits,
so modules never import the bus implementation to declare one.
"""

from __future__ import annotations

from typing import Generic, Protocol, Sequence, Type, TypeVar

from shared.domain.events import DomainEvent

EventT = TypeVar("EventT", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol, Generic[EventT]):
    """Reacts to one kind of domain event."""

    def handle(self, event: EventT) -> None: ...


class IEventBus(Protocol):
    """Routes each published event to the handlers subscribed to its class."""

    def subscribe(
        self, event_class: Type[EventT], handler: IEventHandler[EventT]
    ) -> None: ...

    def handlers_for(self, event_class: Type[DomainEvent]) -> Sequence[IEventHandler]: ...

    def publish(self, event: DomainEvent) -> None: ...
