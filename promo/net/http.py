"""HTTP helpers providing resilient sessions with retries."""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from promo.errors import IoError
from promo.utils import redact_secrets


def retry_session(
    total: int = 3,
    backoff: float = 0.5,
    status_forcelist: tuple[int, ...] = (429, 500, 502, 503, 504),
    allowed_methods: frozenset[str] | None = None,
) -> requests.Session:
    """Create a requests session with retry configuration.

    Retries transient 429/5xx responses and connection errors; only used for
    fetching generated images, never for generative API calls.
    """

    methods = allowed_methods or frozenset({"GET"})
    session = requests.Session()
    retry = Retry(
        total=total,
        read=total,
        connect=total,
        backoff_factor=backoff,
        status_forcelist=status_forcelist,
        allowed_methods=methods,
        respect_retry_after_header=True,
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def download_bytes(session: requests.Session, url: str, timeout: float = 60.0) -> bytes:
    """GET ``url`` and return the body; any failure becomes an ``IoError``."""
    try:
        resp = session.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise IoError(f"image download failed: {redact_secrets(str(e))}", path=url) from e
    return resp.content
