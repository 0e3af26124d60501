from __future__ import annotations

import logging
from dataclasses import FrozenInstanceError, dataclass
from uuid import uuid4

import pytest

from shared.domain.events import DomainEvent
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


@dataclass(frozen=True)
class SomethingHappened(DomainEvent):
    detail: str = ""


class Recorder:
    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)


class Exploder:
    def handle(self, event):
        raise RuntimeError("boom")


def test_event_name_and_defaults():
    event = SomethingHappened(aggregate_id=uuid4(), detail="x")
    assert event.event_name == "SomethingHappened"
    assert event.event_id is not None
    assert event.occurred_on.tzinfo is not None


def test_events_are_immutable():
    event = SomethingHappened(aggregate_id=uuid4())
    with pytest.raises(FrozenInstanceError):
        event.detail = "changed"


def test_log_fields_are_strings_for_ids_and_dates():
    event = SomethingHappened(aggregate_id=uuid4(), detail="x")
    values = event.log_fields()
    assert values["aggregate_id"] == str(event.aggregate_id)
    assert values["occurred_on"] == event.occurred_on.isoformat()
    assert values["detail"] == "x"


def test_subscribe_is_idempotent():
    bus = InMemoryEventBus()
    recorder = Recorder()
    bus.subscribe(SomethingHappened, recorder)
    bus.subscribe(SomethingHappened, recorder)

    bus.publish(SomethingHappened(aggregate_id=uuid4()))

    assert len(recorder.events) == 1


def test_failing_handler_does_not_stop_the_others(caplog):
    bus = InMemoryEventBus()
    recorder = Recorder()
    bus.subscribe(SomethingHappened, Exploder())
    bus.subscribe(SomethingHappened, recorder)

    with caplog.at_level(logging.ERROR):
        bus.publish(SomethingHappened(aggregate_id=uuid4()))

    assert len(recorder.events) == 1
    assert any(
        "event_bus.handler_failed" in record.getMessage() for record in caplog.records
    )
