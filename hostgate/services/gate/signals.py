"""Request classification helpers for the download gate.

All helpers take plain mappings and treat a missing header as absent, so
they never raise on malformed or incomplete requests.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import PurePosixPath

from .constants import (
    ATTACHMENT_ACCEPT_TOKENS,
    ATTACHMENT_DISPOSITION_TOKEN,
    BLOCKED_USER_AGENTS,
    CLIENT_HINT_HEADER,
    COMPRESSION_SCHEMES,
    DOWNLOAD_EXTENSIONS,
    FETCH_METADATA_HEADERS,
    HTML_MEDIA_TYPE,
    MODERN_BROWSERS,
    MODERN_IMAGE_TYPES,
    UserAgentPattern,
)
from .schemas import ClassifierSignals


logger = logging.getLogger(__name__)


def normalize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of the headers keyed by lower-cased name."""
    return {name.lower(): value for name, value in headers.items()}


def get_referrer(headers: Mapping[str, str]) -> str | None:
    """Return the referrer, accepting both the standard and misspelled header."""
    return headers.get("referer") or headers.get("referrer") or None


def path_extension(path: str) -> str:
    """Lower-cased file extension of the last path segment, without the dot."""
    return PurePosixPath(path).suffix.lstrip(".").lower()


def is_download_attempt(path: str, headers: Mapping[str, str]) -> bool:
    """Check whether the request targets downloadable content.

    True when the path extension is a known download type, or when the
    Accept or Content-Disposition headers ask for an attachment.
    """
    if path_extension(path) in DOWNLOAD_EXTENSIONS:
        return True
    accept = headers.get("accept", "").lower()
    if any(token in accept for token in ATTACHMENT_ACCEPT_TOKENS):
        return True
    disposition = headers.get("content-disposition", "").lower()
    return ATTACHMENT_DISPOSITION_TOKEN in disposition


def match_blocked_user_agent(user_agent: str) -> UserAgentPattern | None:
    """Return the first denylist entry matching the user agent, if any."""
    for entry in BLOCKED_USER_AGENTS:
        if entry.pattern.search(user_agent):
            return entry
    return None


def is_modern_browser(user_agent: str | None, min_version: int = 70) -> bool:
    """Check the user agent against the denylist and the modern browser table.

    Args:
        user_agent: The raw User-Agent header value.
        min_version: Lowest accepted browser major version.

    Returns:
        True if no download tool signature matches and at least one browser
        token carries a major version of min_version or newer.
    """
    if not user_agent:
        return False

    if blocked := match_blocked_user_agent(user_agent):
        logger.debug("User agent %r matches blocked signature: %s", user_agent, blocked.meaning)
        return False

    for entry in MODERN_BROWSERS:
        match = entry.pattern.search(user_agent)
        if match and int(match.group(1)) >= min_version:
            return True
    return False


def _encodings(accept_encoding: str) -> set[str]:
    """Content codings listed in an Accept-Encoding value, without weights."""
    return {
        token.split(";", 1)[0].strip().lower()
        for token in accept_encoding.split(",")
        if token.strip()
    }


def header_feature_score(headers: Mapping[str, str]) -> int:
    """Score how many modern-browser-only header signals a request carries.

    One point each for: an HTML Accept type, a modern image Accept type,
    Accept-Language, two or more compression schemes in Accept-Encoding,
    each of the three Sec-Fetch-* headers, the Sec-CH-UA client hint,
    a keep-alive Connection, Upgrade-Insecure-Requests: 1 and Cache-Control.

    Args:
        headers: Request headers keyed by lower-cased name.
    """
    score = 0
    accept = headers.get("accept", "").lower()

    if HTML_MEDIA_TYPE in accept:
        score += 1
    if any(image_type in accept for image_type in MODERN_IMAGE_TYPES):
        score += 1
    if headers.get("accept-language"):
        score += 1
    encodings = _encodings(headers.get("accept-encoding", ""))
    if len(encodings.intersection(COMPRESSION_SCHEMES)) >= 2:
        score += 1
    score += sum(1 for name in FETCH_METADATA_HEADERS if headers.get(name))
    if headers.get(CLIENT_HINT_HEADER):
        score += 1
    if headers.get("connection", "").strip().lower() == "keep-alive":
        score += 1
    if headers.get("upgrade-insecure-requests", "").strip() == "1":
        score += 1
    if headers.get("cache-control"):
        score += 1

    return score


def build_signals(
    path: str,
    headers: Mapping[str, str],
    cookies: Mapping[str, str],
    js_cookie_name: str = "jsEnabled",
) -> ClassifierSignals:
    """Compute the classifier view of a single request."""
    normalized = normalize_headers(headers)
    return ClassifierSignals(
        user_agent=normalized.get("user-agent") or None,
        referrer=get_referrer(normalized),
        header_score=header_feature_score(normalized),
        has_js_cookie=bool(cookies.get(js_cookie_name)),
        path=path,
        is_download=is_download_attempt(path, normalized),
    )
