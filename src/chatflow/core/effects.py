"""Side effects triggered by sentinel options.

The navigator never performs effects itself; it hands them to an
``EffectHandler`` chosen by the owning session.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from urllib.parse import quote

from ..infrastructure.logging_config import get_logger
from ..models.config import Settings, get_settings
from ..models.flow import DEFAULT_WHATSAPP_MESSAGE, ChatbotConfig

logger = get_logger(__name__)

WHATSAPP_BASE_URL = "https://wa.me/"


def build_whatsapp_url(number: str, message: str = DEFAULT_WHATSAPP_MESSAGE) -> str:
    """Build a WhatsApp deep link.

    Args:
        number: Phone number with country code; non-digits are stripped.
        message: Prefilled chat message.

    Returns:
        ``https://wa.me/<digits>?text=<message>`` URL.
    """
    digits = re.sub(r"\D", "", number or "")
    return f"{WHATSAPP_BASE_URL}{digits}?text={quote(message or DEFAULT_WHATSAPP_MESSAGE)}"


def whatsapp_url_for(config: ChatbotConfig | None, settings: Settings | None = None) -> str:
    """Build the deep link from the stored chatbot config.

    Number and message fall back to settings when the config leaves them empty.
    """
    settings = settings or get_settings()
    number = (config.whatsapp_number if config else "") or settings.whatsapp_number
    message = (config.whatsapp_message if config else "") or settings.whatsapp_message
    return build_whatsapp_url(number, message)


class EffectHandler(ABC):
    """Receives the external actions requested by sentinel options."""

    @abstractmethod
    def open_whatsapp(self) -> None:
        """Open the WhatsApp deep link."""
        pass

    @abstractmethod
    def navigate(self, path: str) -> None:
        """Navigate the site to ``path``."""
        pass


class LiveEffects(EffectHandler):
    """Forwards effects to the visitor-facing client."""

    def __init__(
        self,
        whatsapp_url: str,
        open_url: Callable[[str], None],
        navigate_to: Callable[[str], None],
    ) -> None:
        self.whatsapp_url = whatsapp_url
        self._open_url = open_url
        self._navigate_to = navigate_to

    def open_whatsapp(self) -> None:
        self._open_url(self.whatsapp_url)

    def navigate(self, path: str) -> None:
        self._navigate_to(path)


class PreviewEffects(EffectHandler):
    """Blocks effects during admin preview and records what would happen."""

    def __init__(self) -> None:
        self.notices: list[str] = []

    def open_whatsapp(self) -> None:
        self._notice("This will open WhatsApp on real site. (Preview blocked)")

    def navigate(self, path: str) -> None:
        self._notice(f"This will open: {path} (Preview blocked)")

    def _notice(self, message: str) -> None:
        self.notices.append(message)
        logger.info("preview_effect_blocked", notice=message)
