import logging

import requests

from taixiu.config import settings
from taixiu.models import Round

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    pass


def extract_records(data) -> list[dict]:
    """The feed answers with a list, {'data': [...]}, {'result': [...]} or one record."""
    if isinstance(data, list):
        return [x for x in data if isinstance(x, dict)]
    if isinstance(data, dict):
        for key in ('data', 'result'):
            if isinstance(data.get(key), list):
                return [x for x in data[key] if isinstance(x, dict)]
        return [data]
    return []


def fetch_rounds(url: str | None = None, timeout: float | None = None) -> list[Round]:
    url = url or settings.upstream_url
    try:
        r = requests.get(url, timeout=timeout or settings.upstream_timeout)
        r.raise_for_status()
        data = r.json()
    except requests.RequestException as e:
        logger.error("Error fetching data from upstream %s: %s", url, e)
        raise UpstreamError(f"upstream request failed: {e}") from e
    except ValueError as e:
        logger.error("Upstream %s returned invalid JSON: %s", url, e)
        raise UpstreamError("upstream returned invalid JSON") from e
    rounds = [Round.from_payload(x) for x in extract_records(data)]
    if not rounds:
        raise UpstreamError("upstream returned no rounds")
    return rounds
