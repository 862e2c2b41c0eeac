"""Capture pipeline: turns captured HTML into a self-contained archive document."""

import hashlib
import logging
import re

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

import constants
from api_clients.asset_client import Deadline, fetch_resource
from content_types import extension_for_content_type, extension_from_url, guess_content_type, is_css
from css_processor import rewrite_css
from file_handler import asset_object_path, asset_stored_path, asset_url, save_archive_html, save_asset_manifest
from html_processor import rewrite_document
from models import Asset, CaptureContext, CaptureResult
from url_resolver import parse_base_url, resolve_url

logger = logging.getLogger(__name__)

# Extensions taken from URL paths end up in object names
SAFE_EXTENSION_PATTERN = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


class CaptureError(Exception):
    """The capture as a whole failed; no partial result exists."""


class EmptyDocumentError(CaptureError, ValueError):
    pass


class DocumentParseError(CaptureError):
    pass


def stored_asset_name(url, ext):
    """Object name for a resource: sha1 of its absolute URL plus an extension."""
    return hashlib.sha1(url.encode('utf-8')).hexdigest() + ext


def choose_extension(url, declared_content_type):
    ext = extension_from_url(url)
    if ext and SAFE_EXTENSION_PATTERN.match(ext):
        return ext
    return extension_for_content_type(declared_content_type) or constants.FALLBACK_EXTENSION


class Processor:
    """
    Archives single pages.

    One instance serves any number of captures; all per-capture state lives
    in a CaptureContext created by `process`.
    """

    def __init__(self, store, config=None):
        self.store = store
        self.config = dict(config or {})
        self.max_css_depth = self.config.get('max_css_depth', constants.DEFAULT_MAX_CSS_DEPTH)

    def new_deadline(self):
        return Deadline(self.config.get('capture_timeout_seconds', constants.DEFAULT_CAPTURE_TIMEOUT))

    def process(self, archive_id, page_url, raw_html, deadline=None):
        """
        Rewrites every external resource of a captured page to a stored copy.

        Args:
            archive_id: Caller-assigned id, embedded in every rewritten URL.
            page_url: URL the HTML was captured from; base for relative references.
            raw_html: The captured document (str, or UTF-8 bytes).
            deadline: Time budget for all fetches; a new one from config if omitted.

        Returns:
            CaptureResult with the serialized UTF-8 document and stored assets.

        Raises:
            EmptyDocumentError: raw_html is empty.
            DocumentParseError: the document could not be parsed at all.
        """
        if not raw_html:
            raise EmptyDocumentError("empty html")
        if isinstance(raw_html, bytes):
            raw_html = raw_html.decode('utf-8', errors='replace')

        try:
            soup = BeautifulSoup(raw_html, 'html5lib')
        except (ParserRejectedMarkup, ValueError) as e:
            raise DocumentParseError(f"could not parse html for {page_url}: {e}") from e

        capture = CaptureContext(archive_id=archive_id, deadline=deadline or self.new_deadline())
        base = parse_base_url(page_url)
        logger.info(f"Capturing {page_url} as archive {archive_id}")

        assets = rewrite_document(soup, lambda raw: self._localize(capture, base, raw, css_depth=0))
        html = soup.decode().encode('utf-8')

        if capture.deadline.expired:
            logger.warning(f"Capture deadline expired for {page_url}; some resources were left remote.")
        logger.info(f"Finished capture of {page_url}: {len(assets)} assets stored for archive {archive_id}")
        return CaptureResult(html=html, assets=assets)

    def save_capture(self, archive_id, result):
        """Stores the rewritten document and its asset manifest. Raises OSError on failure."""
        html_path = save_archive_html(self.store, archive_id, result.html)
        save_asset_manifest(self.store, archive_id, result.manifest())
        return html_path

    def _localize(self, capture, base, raw, css_depth):
        """
        Resolves, fetches and stores one reference.

        Returns:
            tuple: (local asset URL or None, newly stored assets)
        """
        absolute_url, ok = resolve_url(base, raw)
        if not ok:
            return None, []
        stored_path, assets = self._download_and_store(capture, absolute_url, css_depth)
        if stored_path is None:
            return None, assets
        return asset_url(capture.archive_id, stored_path), assets

    def _download_and_store(self, capture, url, css_depth):
        """
        Fetch-and-store path shared by the document and stylesheet rewriters.

        Returns:
            tuple: (stored path or None, newly stored assets). A cache hit
            returns the stored path with no assets.
        """
        cached = capture.cache.get(url)
        if cached is not None:
            logger.debug(f"Reusing stored copy of {url}: {cached.stored_path}")
            return cached.stored_path, []
        if capture.cache.has_failed(url):
            return None, []

        resource = fetch_resource(url, capture.deadline, config=self.config)
        if resource is None:
            capture.cache.mark_failed(url)
            return None, []

        ext = choose_extension(url, resource.content_type)
        name = stored_asset_name(url, ext)
        stored_path = asset_stored_path(name)
        content_type = guess_content_type(name, resource.content_type)
        body = resource.body

        # Registered before the stylesheet is rewritten so that a reference
        # back to it resolves to this entry instead of being fetched again
        capture.cache.put(url, stored_path, content_type)

        nested_assets = []
        if is_css(content_type, ext) or is_css(resource.content_type):
            if css_depth <= self.max_css_depth:
                body, nested_assets = rewrite_css(
                    body, url,
                    lambda css_base, raw: self._localize(capture, css_base, raw, css_depth + 1),
                )
            else:
                logger.debug(f"Storing nested stylesheet {url} without rewriting (depth {css_depth})")

        try:
            self.store.put_bytes(asset_object_path(capture.archive_id, name), body, content_type)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to store asset {url} for archive {capture.archive_id}: {e}")
            capture.cache.discard(url)
            capture.cache.mark_failed(url)
            return None, nested_assets

        asset = Asset(original=url, stored=stored_path, type=content_type)
        return stored_path, [asset] + nested_assets
