"""
Voice capture capability.

Speech-to-text runs in the browser (webkitSpeechRecognition). The server
only decides whether to offer it and with which settings; the transcript
comes back as ordinary search text through POST /dashboard/search.

Settings are fixed: locale en-US, one utterance per capture, final results
only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Any, Optional


DEFAULT_LOCALE = "en-US"

# Browsers that ship webkitSpeechRecognition. Firefox does not.
_SUPPORTED_AGENTS = re.compile(r"(Chrome|CriOS|Edg|Safari)/", re.IGNORECASE)
_UNSUPPORTED_AGENTS = re.compile(r"(Firefox|FxiOS)/", re.IGNORECASE)


@dataclass(frozen=True)
class VoiceSettings:
    locale: str = DEFAULT_LOCALE
    continuous: bool = False
    interim_results: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Keys match the browser recognition object's properties."""
        return {
            "lang": self.locale,
            "continuous": self.continuous,
            "interimResults": self.interim_results,
        }


class VoiceCapture:
    """Capability interface. Templates only read these attributes."""

    supported: bool = False
    unsupported_message: str = "Voice recognition not supported in this browser"

    @property
    def settings(self) -> Optional[VoiceSettings]:
        return None

    def client_config(self) -> Dict[str, Any]:
        config = {"supported": self.supported}
        if self.settings is not None:
            config.update(self.settings.to_dict())
        else:
            config["message"] = self.unsupported_message
        return config


class SupportedVoiceCapture(VoiceCapture):
    supported = True

    def __init__(self, locale: str = DEFAULT_LOCALE):
        self._settings = VoiceSettings(locale=locale)

    @property
    def settings(self) -> VoiceSettings:
        return self._settings


class UnsupportedVoiceCapture(VoiceCapture):
    supported = False


def detect_voice_capture(user_agent: Optional[str], locale: str = DEFAULT_LOCALE) -> VoiceCapture:
    """Pick the capability variant for a browser's User-Agent header."""
    if not user_agent or _UNSUPPORTED_AGENTS.search(user_agent):
        return UnsupportedVoiceCapture()
    if _SUPPORTED_AGENTS.search(user_agent):
        return SupportedVoiceCapture(locale=locale)
    return UnsupportedVoiceCapture()
