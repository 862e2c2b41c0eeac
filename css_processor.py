# Module for localizing the resources a stylesheet references

import logging
import re

logger = logging.getLogger(__name__)

# One alternation so every reference is visited exactly once:
#   1. @import url(...)
#   2. @import "..." / @import '...'
#   3. url(...) anywhere else
CSS_REFERENCE_PATTERN = re.compile(
    r"@import\s+url\(([^)]*)\)"
    r"|@import\s+(['\"])([^'\"]*)\2"
    r"|url\(([^)]*)\)",
    re.IGNORECASE,
)


def _clean_reference(raw):
    """Strips whitespace and one layer of quotes from a url() argument."""
    return raw.strip().strip('"\'').strip()


def rewrite_css(css_bytes, css_url, localize):
    """
    Rewrites url() and @import references in a stylesheet.

    References are resolved against the stylesheet's own URL, not the page's.
    `localize(base, raw)` fetches and stores one reference and returns
    (local_url or None, assets). A reference that cannot be localized keeps
    its original text.

    Returns:
        tuple: (rewritten CSS bytes, list of assets stored along the way)
    """
    # surrogateescape lets bytes that are not UTF-8 pass through untouched
    css_text = css_bytes.decode('utf-8', errors='surrogateescape')
    assets = []
    rewrite_count = 0

    def replace(match):
        nonlocal rewrite_count
        if match.group(1) is not None:
            raw, is_import = match.group(1), True
        elif match.group(3) is not None:
            raw, is_import = match.group(3), True
        else:
            raw, is_import = match.group(4), False

        reference = _clean_reference(raw)
        local_url, found = localize(css_url, reference)
        assets.extend(found)
        if local_url is None:
            return match.group(0)

        rewrite_count += 1
        if is_import:
            return f'@import url("{local_url}")'
        return f'url("{local_url}")'

    rewritten = CSS_REFERENCE_PATTERN.sub(replace, css_text)
    if rewrite_count:
        logger.debug(f"Rewrote {rewrite_count} references in stylesheet {css_url}")
    return rewritten.encode('utf-8', errors='surrogateescape'), assets
