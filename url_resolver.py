# Module for resolving resource references found in HTML and CSS

import logging
from urllib.parse import urljoin, urlsplit

import constants

logger = logging.getLogger(__name__)


def _is_fetchable(parsed):
    return parsed.scheme.lower() in constants.ALLOWED_SCHEMES and bool(parsed.netloc)


def parse_base_url(page_url):
    """
    Returns the page URL usable as a resolution base, or None when it is not
    an absolute http(s) URL. Without a base only absolute references resolve.
    """
    if not page_url:
        return None
    page_url = page_url.strip()
    try:
        parsed = urlsplit(page_url)
    except ValueError:
        logger.warning(f"Could not parse page URL {page_url!r}; only absolute references will be localized.")
        return None
    if not _is_fetchable(parsed):
        logger.warning(f"Page URL {page_url!r} is not an absolute http(s) URL; only absolute references will be localized.")
        return None
    return page_url


def resolve_url(base, raw):
    """
    Resolves a raw reference against a base URL.

    Returns:
        tuple: (absolute_url, True) when the reference points at an http(s)
        resource, otherwise (raw, False) with the input passed through unchanged.
    """
    if raw is None:
        return raw, False
    candidate = raw.strip()
    lowered = candidate.lower()
    if not candidate or candidate.startswith('#') or lowered.startswith(constants.SKIPPED_REFERENCE_PREFIXES):
        return raw, False

    try:
        if base:
            candidate = urljoin(base, candidate)
        parsed = urlsplit(candidate)
        # Accessing the port validates it (urlsplit itself is lenient)
        parsed.port
    except ValueError as e:
        logger.debug(f"Unparsable reference {raw!r}: {e}")
        return raw, False

    if not _is_fetchable(parsed):
        return raw, False
    return parsed.geturl(), True
