"""Ask the remote tutor one question over HTTP. One request, one complete reply, no retries."""
import logging
from typing import Any

import requests

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class TutorServiceError(Exception):
    """The tutor could not be reached or sent back something unusable."""


def ask(question: str, *, url: str | None = None, timeout: float | None = None) -> Any:
    """
    POST {"question": question} to the tutor and return the "response" field.
    The value is either reply text or structured data (dict, list, None, ...).
    Raises TutorServiceError on connection errors, timeouts, non-2xx statuses,
    non-JSON bodies and bodies without "response".
    """
    settings = get_settings()
    url = url or settings.tutor_api_url
    timeout = timeout or settings.tutor_timeout_seconds
    try:
        resp = requests.post(
            url,
            json={"question": question},
            timeout=timeout,
            headers={"Accept": "application/json"},
        )
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        logger.warning("Tutor request failed %s: %s", url, e)
        raise TutorServiceError(f"Tutor request failed: {e}") from e
    except ValueError as e:
        # Body is not JSON (older requests raise plain ValueError)
        logger.warning("Tutor sent a non-JSON body %s: %s", url, e)
        raise TutorServiceError(f"Tutor reply is not JSON: {e}") from e

    if not isinstance(data, dict) or "response" not in data:
        logger.warning("Tutor reply has no 'response' field: %s", url)
        raise TutorServiceError("Tutor reply has no 'response' field")
    return data["response"]
