# Module for archive storage (filesystem-backed object store and path layout)

import os
import json
import logging
import posixpath
import shutil
import constants # Import constants


# --- Object Paths ---
def archive_prefix(archive_id):
    """Namespace holding every object belonging to one archive."""
    return f"{constants.ARCHIVES_PREFIX}/{archive_id}"


def asset_stored_path(name):
    """Path of an asset relative to its archive prefix (as recorded in the manifest)."""
    return f"{constants.ASSETS_DIR_NAME}/{name}"


def asset_object_path(archive_id, name):
    return f"{archive_prefix(archive_id)}/{asset_stored_path(name)}"


def index_object_path(archive_id):
    return f"{archive_prefix(archive_id)}/{constants.INDEX_FILENAME}"


def manifest_object_path(archive_id):
    return f"{archive_prefix(archive_id)}/{constants.MANIFEST_FILENAME}"


def asset_url(archive_id, stored_path):
    """URL the serving layer answers for a stored asset."""
    return f"{constants.ASSET_URL_PREFIX}/{archive_id}/{stored_path}"


def resolve_asset_request(archive_id, path_suffix):
    """Maps the suffix of an /api/assets/{archive_id}/... request to its object path."""
    return f"{archive_prefix(archive_id)}/{path_suffix.lstrip('/')}"


def _normalize_object_path(object_path):
    """Validates an object path and returns it in canonical form."""
    if not object_path or not isinstance(object_path, str):
        raise ValueError("Object path must be a non-empty string.")
    if '\\' in object_path or '\x00' in object_path:
        raise ValueError(f"Invalid characters in object path: {object_path!r}")
    normalized = posixpath.normpath(object_path.lstrip('/'))
    if normalized in ('.', '..') or normalized.startswith('../'):
        raise ValueError(f"Object path escapes the storage root: {object_path!r}")
    if normalized.endswith(constants.OBJECT_META_SUFFIX):
        raise ValueError(f"Object path uses the reserved suffix {constants.OBJECT_META_SUFFIX}: {object_path!r}")
    return normalized


# --- Object Store ---
class FileStore:
    """
    Object store addressed by '/'-separated path strings, kept under a root
    directory. Each object's content type lives in a JSON sidecar next to it.
    """

    def __init__(self, root_dir):
        self.root_dir = os.path.abspath(root_dir)

    def _file_path(self, object_path):
        normalized = _normalize_object_path(object_path)
        return os.path.join(self.root_dir, *normalized.split('/'))

    def put_bytes(self, object_path, data, content_type):
        """Writes an object, replacing any previous one at the same path. Raises OSError on failure."""
        full_path = self._file_path(object_path)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, 'wb') as f:
            f.write(data)
        with open(full_path + constants.OBJECT_META_SUFFIX, 'w', encoding='utf-8') as f:
            json.dump({"content_type": content_type, "size": len(data)}, f)
        logging.debug(f"Stored object {object_path} ({len(data)} bytes, {content_type})")

    def get(self, object_path):
        """Opens an object for reading. Raises FileNotFoundError if it does not exist."""
        return open(self._file_path(object_path), 'rb')

    def exists(self, object_path):
        return os.path.isfile(self._file_path(object_path))

    def content_type(self, object_path):
        """Returns the content type recorded for an object (octet-stream if unknown)."""
        meta_path = self._file_path(object_path) + constants.OBJECT_META_SUFFIX
        try:
            with open(meta_path, 'r', encoding='utf-8') as f:
                meta = json.load(f)
        except FileNotFoundError:
            return constants.DEFAULT_CONTENT_TYPE
        except json.JSONDecodeError:
            logging.warning(f"Corrupt metadata for object {object_path}; assuming {constants.DEFAULT_CONTENT_TYPE}.")
            return constants.DEFAULT_CONTENT_TYPE
        return meta.get("content_type") or constants.DEFAULT_CONTENT_TYPE

    def remove_prefix(self, prefix):
        """Deletes every object under a prefix. Returns False if nothing was there."""
        full_path = self._file_path(prefix)
        if not os.path.isdir(full_path):
            return False
        shutil.rmtree(full_path)
        logging.info(f"Removed all objects under {prefix}")
        return True


# --- Archive Saving ---
def save_archive_html(store, archive_id, html_bytes):
    """Stores the rewritten document and returns its object path."""
    object_path = index_object_path(archive_id)
    store.put_bytes(object_path, html_bytes, constants.HTML_CONTENT_TYPE)
    logging.info(f"Successfully saved archive document: {object_path}")
    return object_path


def save_asset_manifest(store, archive_id, manifest):
    """Stores the asset list as JSON and returns its object path."""
    object_path = manifest_object_path(archive_id)
    data = json.dumps(manifest, indent=2).encode('utf-8')
    store.put_bytes(object_path, data, constants.MANIFEST_CONTENT_TYPE)
    logging.info(f"Successfully saved asset manifest ({len(manifest)} assets): {object_path}")
    return object_path
