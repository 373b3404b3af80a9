"""Pattern tables used to classify download requests.

Each table is plain data so the classification rules can be read, extended
and tested without touching the gate logic.
"""
from __future__ import annotations

import re
from typing import NamedTuple


class UserAgentPattern(NamedTuple):
    """A compiled user agent pattern and what a match means."""

    pattern: re.Pattern[str]
    meaning: str


DOWNLOAD_EXTENSIONS: frozenset[str] = frozenset({
    # Documents
    "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "odt", "ods", "odp",
    "rtf", "txt", "csv", "epub", "md",
    # Archives
    "zip", "rar", "7z", "tar", "gz", "tgz", "bz2", "xz", "zst", "iso", "dmg",
    # Audio and video
    "mp3", "mp4", "mkv", "avi", "mov", "wmv", "flv", "webm", "wav", "flac",
    "aac", "ogg", "m4a",
    # Images
    "jpg", "jpeg", "png", "gif", "bmp", "webp", "svg", "tif", "tiff", "ico",
    # Executables and installers
    "exe", "msi", "apk", "deb", "rpm", "appimage", "pkg", "bin", "sh", "bat",
})

ATTACHMENT_ACCEPT_TOKENS: tuple[str, ...] = ("application/octet-stream", "attachment")
ATTACHMENT_DISPOSITION_TOKEN = "attachment"

BLOCKED_USER_AGENTS: tuple[UserAgentPattern, ...] = (
    UserAgentPattern(re.compile(r"wget", re.IGNORECASE), "GNU Wget"),
    UserAgentPattern(re.compile(r"curl", re.IGNORECASE), "curl"),
    UserAgentPattern(re.compile(r"IDM", re.IGNORECASE), "Internet Download Manager"),
    UserAgentPattern(re.compile(r"Downloader", re.IGNORECASE), "generic download manager"),
    UserAgentPattern(re.compile(r"libwww-perl", re.IGNORECASE), "Perl LWP"),
    UserAgentPattern(re.compile(r"python", re.IGNORECASE), "Python HTTP library"),
    UserAgentPattern(re.compile(r"node-fetch", re.IGNORECASE), "Node.js node-fetch"),
    UserAgentPattern(re.compile(r"axios", re.IGNORECASE), "Node.js axios"),
    UserAgentPattern(re.compile(r"got", re.IGNORECASE), "Node.js got"),
    UserAgentPattern(re.compile(r"superagent", re.IGNORECASE), "Node.js superagent"),
    UserAgentPattern(re.compile(r"bot", re.IGNORECASE), "bot"),
    UserAgentPattern(re.compile(r"crawler", re.IGNORECASE), "crawler"),
    UserAgentPattern(re.compile(r"spider", re.IGNORECASE), "spider"),
)

# The first group captures the major version.
MODERN_BROWSERS: tuple[UserAgentPattern, ...] = (
    UserAgentPattern(re.compile(r"Chrome/([0-9]+)", re.IGNORECASE), "Chrome and Chromium based browsers"),
    UserAgentPattern(re.compile(r"Firefox/([0-9]+)", re.IGNORECASE), "Firefox"),
    UserAgentPattern(re.compile(r"Safari/([0-9]+)", re.IGNORECASE), "Safari"),
    UserAgentPattern(re.compile(r"Edg/([0-9]+)", re.IGNORECASE), "Edge (Chromium)"),
    UserAgentPattern(re.compile(r"OPR/([0-9]+)", re.IGNORECASE), "Opera"),
)

HTML_MEDIA_TYPE = "text/html"
MODERN_IMAGE_TYPES: tuple[str, ...] = ("image/webp", "image/avif")
COMPRESSION_SCHEMES: tuple[str, ...] = ("gzip", "deflate", "br", "zstd")
FETCH_METADATA_HEADERS: tuple[str, ...] = ("sec-fetch-dest", "sec-fetch-mode", "sec-fetch-site")
CLIENT_HINT_HEADER = "sec-ch-ua"
MAX_FEATURE_SCORE = 11

LANDING_PAGE_MARKER = "index.html"
