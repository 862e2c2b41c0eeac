# Module for rewriting resource references inside a parsed HTML document

import logging

import constants # Import constants

# Set up a specific logger for this module
logger = logging.getLogger(__name__)


# --- Internal Helper Functions ---
def _find_attribute(tag, name):
    """Returns the tag's own key for attribute `name`, matched case-insensitively."""
    for key in tag.attrs:
        if key.lower() == name:
            return key
    return None


def _attribute_text(value):
    # Multi-valued attributes such as rel come back from BeautifulSoup as lists
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return value or ""


def _rename_attribute(tag, old_key, new_name, value):
    """Renames an attribute in place, replacing any existing attribute with the new name."""
    new_attrs = {}
    for key, existing in tag.attrs.items():
        if key == old_key:
            new_attrs[new_name] = value
        elif key.lower() == new_name:
            continue
        else:
            new_attrs[key] = existing
    tag.attrs = new_attrs


def _rewrite_attribute(tag, name, localize, assets):
    """Localizes one URL-valued attribute. Returns True if it was rewritten."""
    key = _find_attribute(tag, name)
    if key is None:
        return False
    local_url, found = localize(_attribute_text(tag[key]))
    assets.extend(found)
    if local_url is None:
        return False
    logger.debug(f"Rewrote <{tag.name} {key}> {tag[key]} -> {local_url}")
    tag[key] = local_url
    return True


def _promote_lazy_source(tag, localize, assets):
    """
    Turns the first lazy-load attribute present (data-src, ...) into a real
    src pointing at the stored copy. Returns True on success.
    """
    for lazy_name in constants.LAZY_SRC_ATTRIBUTES:
        key = _find_attribute(tag, lazy_name)
        if key is None:
            continue
        local_url, found = localize(_attribute_text(tag[key]))
        assets.extend(found)
        if local_url is None:
            return False
        logger.debug(f"Promoted <img {key}> to src -> {local_url}")
        _rename_attribute(tag, key, 'src', local_url)
        return True
    return False


def split_srcset(value):
    """
    Splits a srcset value into (url, descriptor) pairs.

    A candidate URL is a run of non-whitespace, so commas inside it (data:
    URLs) do not split it; a trailing comma ends the candidate. The
    descriptor runs to the next comma outside parentheses.
    """
    candidates = []
    pos, length = 0, len(value)
    while pos < length:
        while pos < length and (value[pos].isspace() or value[pos] == ','):
            pos += 1
        if pos >= length:
            break
        start = pos
        while pos < length and not value[pos].isspace():
            pos += 1
        url_part = value[start:pos]
        descriptor = ""
        if url_part.endswith(','):
            url_part = url_part.rstrip(',')
        else:
            start, depth = pos, 0
            while pos < length:
                char = value[pos]
                if char == '(':
                    depth += 1
                elif char == ')' and depth:
                    depth -= 1
                elif char == ',' and not depth:
                    break
                pos += 1
            descriptor = value[start:pos].strip()
        if url_part:
            candidates.append((url_part, descriptor))
    return candidates


def rewrite_srcset(value, localize):
    """
    Localizes every candidate URL of a srcset value.

    Descriptors (2x, 480w) are kept as written and candidates are rejoined
    with ", ". If nothing could be localized the value is returned unchanged.

    Returns:
        tuple: (new srcset value, list of assets)
    """
    assets = []
    candidates = []
    changed = False
    for url_part, descriptor in split_srcset(value):
        local_url, found = localize(url_part)
        assets.extend(found)
        if local_url is not None:
            url_part = local_url
            changed = True
        candidates.append(f"{url_part} {descriptor}" if descriptor else url_part)

    if not changed:
        return value, assets
    return ", ".join(candidates), assets


def _rewrite_srcset_attribute(tag, localize, assets):
    key = _find_attribute(tag, 'srcset')
    if key is None:
        return
    new_value, found = rewrite_srcset(_attribute_text(tag[key]), localize)
    assets.extend(found)
    tag[key] = new_value


def _is_localized_link(tag):
    key = _find_attribute(tag, 'rel')
    if key is None:
        return False
    rel = _attribute_text(tag[key]).lower()
    return any(keyword in rel for keyword in constants.LINK_REL_KEYWORDS)


# --- Document Rewriting ---
def rewrite_document(soup, localize):
    """
    Walks every element of a parsed document (depth-first, document order)
    and points resource-bearing attributes at stored copies.

    `localize(raw)` resolves, fetches and stores a single reference and
    returns (local_url or None, assets). Failed references keep their
    original value; the walk never stops because of one resource.

    Returns:
        list: Assets in the order they were stored.
    """
    assets = []
    for tag in soup.find_all(True):
        tag_name = tag.name.lower()

        if tag_name == 'img':
            # A promoted lazy source replaces the placeholder src, so only
            # fall back to src when there is nothing to promote
            if not _promote_lazy_source(tag, localize, assets):
                _rewrite_attribute(tag, 'src', localize, assets)
            _rewrite_srcset_attribute(tag, localize, assets)
        elif tag_name in constants.SRC_TAGS:
            _rewrite_attribute(tag, 'src', localize, assets)
        elif tag_name == 'link' and _is_localized_link(tag):
            _rewrite_attribute(tag, 'href', localize, assets)

    logger.debug(f"Document walk finished with {len(assets)} assets stored")
    return assets
