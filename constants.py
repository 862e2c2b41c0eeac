# constants.py - Define constants used throughout the application

# --- Storage Layout ---
DEFAULT_OUTPUT_DIR = "archive_store"
DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_LOG_FILE = "archiver.log"
ARCHIVES_PREFIX = "archives" # Top-level namespace for every archive's objects
ASSETS_DIR_NAME = "assets" # Sub-path under the archive prefix holding fetched resources
INDEX_FILENAME = "index.html"
MANIFEST_FILENAME = "assets.json"
OBJECT_META_SUFFIX = ".meta.json" # Sidecar holding an object's content type

# --- Rewritten URLs ---
ASSET_URL_PREFIX = "/api/assets" # Served as /api/assets/{archive_id}/{stored_path}

# --- Content Types ---
DEFAULT_CONTENT_TYPE = "application/octet-stream"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"
MANIFEST_CONTENT_TYPE = "application/json"
FALLBACK_EXTENSION = ".bin" # Used when neither URL nor Content-Type yields an extension

# Reverse lookup used only to pick a stored filename extension
CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
    "text/css": ".css",
    "application/javascript": ".js",
    "text/javascript": ".js",
}

# --- Reference Filtering ---
ALLOWED_SCHEMES = ("http", "https")
SKIPPED_REFERENCE_PREFIXES = ("data:", "javascript:")

# --- DOM Rewriting ---
SRC_TAGS = ("img", "source", "video", "audio", "script")
LAZY_SRC_ATTRIBUTES = ("data-src", "data-original", "data-lazy-src", "data-lazy") # Priority order
LINK_REL_KEYWORDS = ("stylesheet", "icon")

# --- Request Defaults ---
DEFAULT_USER_AGENT = "WebArchiveBot/0.1"
DEFAULT_TIMEOUT_CONTENT = 20 # Per-request timeout for resource downloads
DEFAULT_CAPTURE_TIMEOUT = 60 # One deadline shared by every fetch of a capture
DEFAULT_MAX_ASSET_BYTES = 20 * 1024 * 1024
DOWNLOAD_CHUNK_SIZE = 64 * 1024

# --- CSS ---
DEFAULT_MAX_CSS_DEPTH = 1 # Linked stylesheets are level 0, their imports level 1

# --- Logging ---
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
