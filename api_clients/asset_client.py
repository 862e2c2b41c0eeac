# Module for downloading page resources (images, scripts, stylesheets, fonts)

import logging
import time
from dataclasses import dataclass

import requests

import constants
from .decorators import skip_on_fetch_error

logger = logging.getLogger(__name__)


# --- Errors ---
class FetchError(Exception):
    """A resource could not be downloaded. Never fatal to a capture."""


class BadStatusError(FetchError):
    def __init__(self, url, status_code):
        super().__init__(f"bad status {status_code} for {url}")
        self.url = url
        self.status_code = status_code


class ResponseTooLargeError(FetchError):
    def __init__(self, url, limit):
        super().__init__(f"response for {url} exceeds {limit} bytes")
        self.url = url
        self.limit = limit


class DeadlineExceededError(FetchError):
    pass


# --- Deadline ---
class Deadline:
    """
    One time budget shared by every fetch a capture triggers.

    Each request gets the smaller of its own timeout and the time left, and
    nothing is sent once the budget is spent.
    """

    def __init__(self, seconds, clock=time.monotonic):
        self._clock = clock
        self.seconds = seconds
        self.expires_at = clock() + seconds

    def remaining(self):
        return max(0.0, self.expires_at - self._clock())

    @property
    def expired(self):
        return self.remaining() <= 0

    def timeout(self, request_timeout):
        """Returns the timeout for the next request or raises if none is left."""
        remaining = self.remaining()
        if remaining <= 0:
            raise DeadlineExceededError(f"capture deadline of {self.seconds}s exceeded")
        return min(request_timeout, remaining)


@dataclass
class FetchedResource:
    url: str
    body: bytes
    content_type: str


def _read_capped(response, url, max_bytes, deadline):
    chunks = []
    total = 0
    for chunk in response.iter_content(chunk_size=constants.DOWNLOAD_CHUNK_SIZE):
        if not chunk:
            continue
        total += len(chunk)
        if total > max_bytes:
            raise ResponseTooLargeError(url, max_bytes)
        if deadline is not None and deadline.expired:
            raise DeadlineExceededError(f"capture deadline exceeded while reading {url}")
        chunks.append(chunk)
    return b"".join(chunks)


# --- Resource Fetching ---
@skip_on_fetch_error(handled=(FetchError,))
def fetch_resource(url, deadline=None, config=None):
    """
    Downloads a single resource with one GET request.

    Returns a FetchedResource, or None on any failure (network error, non-2xx
    status, body over the size cap, expired deadline).
    """
    config = config or {}
    user_agent = config.get('user_agent', constants.DEFAULT_USER_AGENT)
    request_timeout = config.get('request_timeout_content', constants.DEFAULT_TIMEOUT_CONTENT)
    max_bytes = config.get('max_asset_bytes', constants.DEFAULT_MAX_ASSET_BYTES)

    if deadline is not None:
        request_timeout = deadline.timeout(request_timeout)
    headers = {'User-Agent': user_agent}

    logger.debug(f"Attempting to fetch resource: {url}")
    response = requests.get(url, headers=headers, timeout=request_timeout, stream=True)
    try:
        if not 200 <= response.status_code < 300:
            raise BadStatusError(url, response.status_code)

        declared_length = response.headers.get('Content-Length', '')
        if declared_length.isdigit() and int(declared_length) > max_bytes:
            raise ResponseTooLargeError(url, max_bytes)

        body = _read_capped(response, url, max_bytes, deadline)
        content_type = response.headers.get('Content-Type', '')
        logger.debug(f"Successfully fetched resource: {url} ({len(body)} bytes, {content_type or 'no content type'})")
        return FetchedResource(url=url, body=body, content_type=content_type)
    finally:
        # Ensure the response is always closed
        response.close()
