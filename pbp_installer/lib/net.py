from __future__ import annotations

import logging

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0


class TimezoneLookupError(RuntimeError):
    pass


def lookup_timezone(url: str, *, timeout_s: float = DEFAULT_TIMEOUT_S) -> str:
    """Infer the local timezone from an IP geolocation service.

    The service must answer with a JSON object carrying a ``timezone`` field
    (ip-api.com does).
    """

    try:
        response = requests.get(url, timeout=timeout_s)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        raise TimezoneLookupError(f"Timezone lookup via {url} failed: {e}") from e

    tz = data.get("timezone") if isinstance(data, dict) else None
    if not tz:
        raise TimezoneLookupError(f"No timezone in response from {url}")

    logger.info("Geolocated timezone: %s", tz)
    return str(tz)
