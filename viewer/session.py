import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from schemas import Explanation
from viewer.gateway_client import GatewayClient, GatewayError
from viewer.speech import SpeechCoordinator, SpeechToggle, card_text, play_all_text
from viewer.upload import InvalidFileType, load_image_as_data_url

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    title: str
    description: str
    variant: str = "default"


class ViewerSession:
    """State of one page session: selected image, explanations and notifications."""

    def __init__(self, client: Optional[GatewayClient] = None, speech: Optional[SpeechCoordinator] = None):
        self.client = client or GatewayClient()
        self.speech = speech or SpeechCoordinator()
        self.image_base64: Optional[str] = None
        self.explanations: List[Explanation] = []
        self.is_analyzing = False
        self.notifications: List[Notification] = []
        self.card_toggles: List[SpeechToggle] = []
        self.play_all_toggle: Optional[SpeechToggle] = None

    @property
    def can_upload(self) -> bool:
        return not self.is_analyzing

    @property
    def can_analyze(self) -> bool:
        return self.image_base64 is not None and not self.is_analyzing

    def notify(self, title: str, description: str, variant: str = "default") -> None:
        self.notifications.append(Notification(title, description, variant))

    def dismiss(self, index: int) -> None:
        del self.notifications[index]

    def select_image(self, path: Union[str, Path]) -> bool:
        """Load an image as the current preview. Returns False if it was rejected."""
        if not self.can_upload:
            return False
        try:
            self.image_base64 = load_image_as_data_url(path)
        except InvalidFileType as e:
            self.notify("Invalid file type", str(e), "destructive")
            return False
        return True

    def upload(self, path: Union[str, Path]) -> bool:
        """Select an image and analyze it straight away."""
        return self.select_image(path) and self.analyze()

    def analyze(self) -> bool:
        if self.is_analyzing:
            return False
        if self.image_base64 is None:
            self.notify("No image uploaded", "Please upload a flowchart first", "destructive")
            return False

        self.is_analyzing = True
        self._set_explanations([])
        try:
            explanations = self.client.analyze(self.image_base64)
        except GatewayError as e:
            logger.error("Analysis error: %s", e.message)
            self.notify("Analysis failed", e.message or "Please try again", "destructive")
            return False
        finally:
            self.is_analyzing = False

        self._set_explanations(explanations)
        self.notify("Analysis complete!", f"Found {len(explanations)} concepts to explain")
        return True

    def _set_explanations(self, explanations: List[Explanation]) -> None:
        if self.speech.active is not None:
            self.speech.stop(self.speech.active)
        self.explanations = list(explanations)
        self.card_toggles = [self.speech.toggle_for(card_text(e)) for e in self.explanations]
        self.play_all_toggle = self.speech.toggle_for(play_all_text(self.explanations)) if self.explanations else None
