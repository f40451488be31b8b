"""
Fallback responses for requests that exhaust network and cache.

This module produces the three deterministic substitute responses the
engine returns when neither a live nor a cached response is available:
an offline JSON placeholder for data-API requests, an offline HTML page
for document navigations and a generic 503 for everything else.
"""

import json
from typing import Any, Dict

from src.models.responses import OfflinePayload, OfflineRecord, ResponseSnapshot

OFFLINE_TITLE = "Anki Dashboard (Offline)"
OFFLINE_SUBTITLE = "Currently offline - data may be outdated"

OFFLINE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Offline - Anki Dashboard</title>
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: #111827;
            color: #e5e7eb;
            display: flex;
            align-items: center;
            justify-content: center;
            height: 100vh;
            margin: 0;
            text-align: center;
            padding: 20px;
        }
        .offline-container { max-width: 400px; }
        .offline-icon { font-size: 48px; margin: 0 auto 20px; opacity: 0.6; }
        h1 { color: #10b981; margin-bottom: 10px; }
        p { opacity: 0.8; margin-bottom: 20px; }
        button {
            background: #10b981;
            color: white;
            border: none;
            padding: 12px 24px;
            border-radius: 6px;
            cursor: pointer;
            font-size: 16px;
        }
        button:hover { background: #059669; }
    </style>
</head>
<body>
    <div class="offline-container">
        <div class="offline-icon">&#128218;</div>
        <h1>You're Offline</h1>
        <p>The Anki Dashboard is not available right now. Please check your internet connection and try again.</p>
        <button onclick="window.location.reload()">Try Again</button>
    </div>
</body>
</html>
"""

UNAVAILABLE_TEXT = "Offline - Resource not available"


class FallbackSynthesizer:
    """
    Generator of synthesized offline responses.

    All methods are static and free of side effects; the same call
    always yields an equal response.

    Example:
        >>> synthesizer = FallbackSynthesizer()
        >>> synthesizer.api_offline_placeholder().status
        200
        >>> synthesizer.generic_unavailable().status
        503
    """

    @staticmethod
    def offline_payload() -> Dict[str, Any]:
        """
        Offline dataset in the shape the host application expects.

        Returns:
            ``{"record": {"studyTasks": [], "studyProgressState": {}, ...}}``
        """
        payload = OfflinePayload(
            record=OfflineRecord(
                study_tracker_title=OFFLINE_TITLE,
                study_tracker_subtitle=OFFLINE_SUBTITLE,
            )
        )
        return payload.model_dump(by_alias=True)

    @staticmethod
    def api_offline_placeholder() -> ResponseSnapshot:
        """Placeholder JSON response for data-API requests (HTTP 200)."""
        body = json.dumps(FallbackSynthesizer.offline_payload()).encode("utf-8")
        return ResponseSnapshot(
            status=200,
            status_text="OK (Cached)",
            headers={"content-type": "application/json"},
            body=body,
        )

    @staticmethod
    def html_offline_page() -> ResponseSnapshot:
        """Offline HTML page with a retry button for document requests (HTTP 200)."""
        return ResponseSnapshot(
            status=200,
            status_text="OK (Offline)",
            headers={"content-type": "text/html; charset=utf-8"},
            body=OFFLINE_HTML.encode("utf-8"),
        )

    @staticmethod
    def generic_unavailable() -> ResponseSnapshot:
        """Plain-text 503 for any other resource type."""
        return ResponseSnapshot(
            status=503,
            status_text="Service Unavailable",
            headers={"content-type": "text/plain; charset=utf-8"},
            body=UNAVAILABLE_TEXT.encode("utf-8"),
        )


# Convenience singleton instance
synthesizer = FallbackSynthesizer()


def api_offline_placeholder() -> ResponseSnapshot:
    """
    Build the offline JSON placeholder.

    Convenience function that calls FallbackSynthesizer.api_offline_placeholder().
    """
    return FallbackSynthesizer.api_offline_placeholder()


def html_offline_page() -> ResponseSnapshot:
    """
    Build the offline HTML page.

    Convenience function that calls FallbackSynthesizer.html_offline_page().
    """
    return FallbackSynthesizer.html_offline_page()


def generic_unavailable() -> ResponseSnapshot:
    """
    Build the generic 503 response.

    Convenience function that calls FallbackSynthesizer.generic_unavailable().
    """
    return FallbackSynthesizer.generic_unavailable()
