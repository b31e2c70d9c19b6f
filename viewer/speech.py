"""Speech playback for explanations.

Each playback source (one card, or "play all") owns a SpeechToggle. The
coordinator makes sure only one of them is speaking at a time.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from schemas import Explanation

logger = logging.getLogger(__name__)

NEXT_TOPIC_SEPARATOR = ". Next topic: "


@dataclass
class Utterance:
    text: str
    rate: float = 1.0
    pitch: float = 1.0
    volume: float = 1.0


class SpeechEngine:
    """Base class for speech backends.

    ``speak`` must eventually call ``on_done`` when the utterance ends or fails,
    unless ``cancel`` is called first.
    """

    name: str = "base"

    def speak(self, utterance: Utterance, on_done: Callable[[], None]) -> None:
        raise NotImplementedError

    def cancel(self) -> None:
        raise NotImplementedError


class LoggingSpeechEngine(SpeechEngine):
    """Engine for environments without audio output: logs what would be spoken."""

    name = "logging"

    def __init__(self) -> None:
        self.spoken: List[Utterance] = []

    def speak(self, utterance: Utterance, on_done: Callable[[], None]) -> None:
        logger.info("[SPEECH] %s", utterance.text)
        self.spoken.append(utterance)
        on_done()

    def cancel(self) -> None:
        logger.info("[SPEECH] cancelled")


def card_text(item: Explanation) -> str:
    return f"{item.term}: {item.explanation}"


def play_all_text(explanations: Sequence[Explanation]) -> str:
    return NEXT_TOPIC_SEPARATOR.join(f"{e.term}: {e.explanation}" for e in explanations)


class SpeechToggle:
    """Two-state flag for one playback source: start if idle, cancel if speaking."""

    def __init__(self, coordinator: "SpeechCoordinator", text: str, rate: float = 0.9):
        self.coordinator = coordinator
        self.text = text
        self.rate = rate
        self.is_speaking = False

    def toggle(self) -> bool:
        """Flip the state and return whether this source is now speaking."""
        if self.is_speaking:
            self.coordinator.stop(self)
        else:
            self.coordinator.start(self)
        return self.is_speaking

    def finished(self) -> None:
        self.is_speaking = False
        self.coordinator.release(self)


class SpeechCoordinator:
    def __init__(self, engine: Optional[SpeechEngine] = None):
        self.engine = engine or LoggingSpeechEngine()
        self.active: Optional[SpeechToggle] = None

    def toggle_for(self, text: str, rate: float = 0.9) -> SpeechToggle:
        return SpeechToggle(self, text, rate=rate)

    def start(self, toggle: SpeechToggle) -> None:
        if self.active is not None:
            self.stop(self.active)
        self.active = toggle
        toggle.is_speaking = True
        self.engine.speak(Utterance(text=toggle.text, rate=toggle.rate), toggle.finished)

    def stop(self, toggle: SpeechToggle) -> None:
        self.engine.cancel()
        toggle.is_speaking = False
        self.release(toggle)

    def release(self, toggle: SpeechToggle) -> None:
        if self.active is toggle:
            self.active = None
