# Module for mapping file extensions and Content-Type headers to each other

import mimetypes
import posixpath
from urllib.parse import urlsplit

import constants


def _media_type(content_type):
    """Strips parameters (charset etc.) and normalizes case."""
    if not content_type:
        return ""
    return content_type.split(';', 1)[0].strip().lower()


def guess_content_type(filename, declared_content_type=None):
    """
    Classifies a stored object.

    The extension of the stored filename wins; the server-declared
    Content-Type is used when the extension is unknown or absent, and
    application/octet-stream when neither is available.
    """
    ext = posixpath.splitext(filename or "")[1]
    if ext:
        guessed, _encoding = mimetypes.guess_type(f"object{ext.lower()}")
        if guessed:
            return guessed
    if declared_content_type and declared_content_type.strip():
        return declared_content_type.strip()
    return constants.DEFAULT_CONTENT_TYPE


def extension_for_content_type(content_type):
    """Returns a filename extension for a handful of web types, or None."""
    return constants.CONTENT_TYPE_EXTENSIONS.get(_media_type(content_type))


def extension_from_url(url):
    """Returns the extension of the URL's last path segment ('' if none)."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return ""
    return posixpath.splitext(path)[1]


def is_css(content_type, ext=""):
    return "text/css" in (content_type or "").lower() or ext.lower() == ".css"
