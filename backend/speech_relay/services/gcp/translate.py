"""
GCP Translation Service

Handles Google Cloud Translation operations.
"""

from typing import Optional

from google.cloud import translate

from speech_relay.config.settings import settings
from speech_relay.config.constants import GCP_TRANSLATE_TIMEOUT_SEC
from speech_relay.services.gcp.credentials import ensure_credentials


class GCPTranslationService:
    """Handles translation and language detection."""

    def __init__(self, project_id: Optional[str] = None, location: Optional[str] = None):
        self.project_id = project_id or settings.GOOGLE_PROJECT_ID
        if not self.project_id:
            raise RuntimeError(
                "GOOGLE_PROJECT_ID is not set. Please update backend/.env accordingly."
            )
        self.location = location or settings.GOOGLE_LOCATION
        ensure_credentials()
        self._client = translate.TranslationServiceClient()

    @property
    def parent(self) -> str:
        return f"projects/{self.project_id}/locations/{self.location}"

    def translate(
        self,
        text: str,
        target_language: str,
        source_language: Optional[str] = None,
    ) -> str:
        """Translate text into the target language."""
        request = {
            "parent": self.parent,
            "contents": [text],
            "mime_type": "text/plain",
            "target_language_code": target_language,
        }
        if source_language:
            request["source_language_code"] = source_language

        response = self._client.translate_text(
            request=request,
            timeout=GCP_TRANSLATE_TIMEOUT_SEC,
        )

        if not response.translations:
            return ""

        return response.translations[0].translated_text

    def detect_language(self, text: str) -> str:
        """Detect the language of `text`; returns "" if nothing was detected."""
        response = self._client.detect_language(
            request={
                "parent": self.parent,
                "content": text,
                "mime_type": "text/plain",
            },
            timeout=GCP_TRANSLATE_TIMEOUT_SEC,
        )

        if not response.languages:
            return ""

        best = max(response.languages, key=lambda language: language.confidence)
        return best.language_code
