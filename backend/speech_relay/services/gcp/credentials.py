"""
Google Cloud credential lookup shared by the GCP services.
"""

import os

from speech_relay.config.settings import settings


def ensure_credentials() -> None:
    """Ensure Google credentials are set in environment."""
    if settings.GOOGLE_APPLICATION_CREDENTIALS and "GOOGLE_APPLICATION_CREDENTIALS" not in os.environ:
        creds_path = settings.GOOGLE_APPLICATION_CREDENTIALS
        # Handle Docker path when running locally
        if creds_path.startswith("/app/") and not os.path.exists(creds_path):
            possible_paths = [
                creds_path.replace("/app/", ""),
                creds_path.replace("/app/", "backend/"),
                os.path.join("speech_relay", "config", os.path.basename(creds_path)),
                os.path.join(os.getcwd(), "speech_relay", "config", os.path.basename(creds_path))
            ]

            for path in possible_paths:
                if os.path.exists(path):
                    creds_path = path
                    break

        os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = creds_path
