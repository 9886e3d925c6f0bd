"""Presentation and pacing hooks used by the round controller.

The engine only ever pushes events; it never waits for an acknowledgement.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Sequence

from .logging_utils import get_logger

log = get_logger("engine.events")


class EventKind(Enum):
    ROUND_START = auto()
    FIRST_BIDDER = auto()
    BID = auto()
    PASS_BID = auto()
    NO_LANDLORD = auto()
    LANDLORD = auto()
    HAND_PLAYED = auto()
    PASS = auto()
    AUTO_PASS = auto()
    BID_DOUBLED = auto()
    TRICK_WON = auto()
    ROUND_WON = auto()
    SCORES = auto()
    RESIGNED = auto()
    GAME_OVER = auto()


@dataclass(frozen=True)
class GameEvent:
    kind: EventKind
    message: str
    player: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)


class EventSink:
    """Receives human-readable status notifications."""

    def notify(self, event: GameEvent) -> None:
        return None


class LoggingSink(EventSink):
    def notify(self, event: GameEvent) -> None:
        log.info("[%s] %s", event.kind.name.lower(), event.message)


class RecordingSink(EventSink):
    """Keeps every event in memory, mostly for tests and the REST service."""

    def __init__(self) -> None:
        self.events: List[GameEvent] = []

    def notify(self, event: GameEvent) -> None:
        self.events.append(event)

    def kinds(self) -> List[EventKind]:
        return [event.kind for event in self.events]

    def clear(self) -> None:
        self.events.clear()


class MultiSink(EventSink):
    def __init__(self, sinks: Sequence[EventSink]) -> None:
        self.sinks = list(sinks)

    def notify(self, event: GameEvent) -> None:
        for sink in self.sinks:
            sink.notify(event)


class Pacer:
    """Suspension points between phases; returns nothing."""

    def beat(self) -> None:
        return None

    def short(self) -> None:
        return None

    def long(self) -> None:
        return None


class NullPacer(Pacer):
    pass


class SleepPacer(Pacer):
    """Real-time pacing for interactive command line play."""

    def __init__(self, beat: float = 0.3, short: float = 0.8, long: float = 2.0) -> None:
        self._delays = {"beat": beat, "short": short, "long": long}

    def _wait(self, key: str) -> None:
        time.sleep(self._delays[key])

    def beat(self) -> None:
        self._wait("beat")

    def short(self) -> None:
        self._wait("short")

    def long(self) -> None:
        self._wait("long")
