"""Download access gate.

Decides, per request for a protected file, whether to serve it, deny it or
send the client through a JavaScript challenge first. The checks run in a
fixed order:

1. Applicability: only download attempts are gated.
2. Referrer allowlist: trusted referrers skip every other check.
3. User agent: download tools and outdated browsers are denied.
4. Header features: requests with too few browser-only headers are denied.
5. Referrer presence: direct hits outside the landing page are denied.
6. JavaScript challenge: clients without the proof cookie are challenged.

The gate keeps no state between requests. The challenge round trip is
carried entirely by the cookie the client sets.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from .constants import LANDING_PAGE_MARKER
from .schemas import AccessDecision, ClassifierSignals, DenyReason
from .signals import build_signals, is_modern_browser

if TYPE_CHECKING:
    from hostgate.config.settings import DownloadCheckSettings


logger = logging.getLogger(__name__)


def is_landing_page(path: str) -> bool:
    """Check whether the path refers to the site's landing page."""
    return path in ("", "/") or LANDING_PAGE_MARKER in path


class AccessGate:
    """Evaluates download requests against the configured checks.

    Example:
        gate = AccessGate(settings.download_check)
        decision = gate.evaluate(request.url.path, request.headers, request.cookies)
    """

    def __init__(self, config: "DownloadCheckSettings | None") -> None:
        """Create a gate for the given configuration.

        Args:
            config: Download check settings. None means the section is
                absent and every check is disabled.
        """
        self.enable_referrer: bool = bool(config and config.enable_referrer)
        self.enable_user_agent: bool = bool(config and config.enable_user_agent)
        self.enable_browser_feature: bool = bool(config and config.enable_browser_feature)
        self.enable_js_check: bool = bool(config and config.enable_js_check)
        self.allowed_ref_domains: tuple[str, ...] = tuple(config.allowed_ref_domains) if config else ()
        self.min_browser_version: int = config.min_browser_version if config else 70
        self.min_feature_score: int = config.min_feature_score if config else 5
        self.js_cookie_name: str = config.js_cookie_name if config else "jsEnabled"

        logger.debug(
            "Download gate checks: referrer=%s user_agent=%s browser_feature=%s js=%s",
            self.enable_referrer,
            self.enable_user_agent,
            self.enable_browser_feature,
            self.enable_js_check,
        )

    @property
    def enabled(self) -> bool:
        """Return True if at least one check is enabled."""
        return (
            self.enable_referrer
            or self.enable_user_agent
            or self.enable_browser_feature
            or self.enable_js_check
        )

    def evaluate(
        self,
        path: str,
        headers: Mapping[str, str],
        cookies: Mapping[str, str] | None = None,
    ) -> AccessDecision:
        """Evaluate a request and return the gate decision."""
        signals = build_signals(path, headers, cookies or {}, self.js_cookie_name)
        return self.decide(signals)

    def decide(self, signals: ClassifierSignals) -> AccessDecision:
        """Run the ordered checks over precomputed signals."""
        if not signals.is_download:
            return AccessDecision.allow()

        if self.enable_referrer and self._referrer_allowlisted(signals.referrer):
            logger.debug("Allowlisted referrer %s for %s", signals.referrer, signals.path)
            return AccessDecision.allow()

        if self.enable_user_agent and not is_modern_browser(
            signals.user_agent, self.min_browser_version
        ):
            return AccessDecision.deny(DenyReason.USER_AGENT_REJECTED)

        if self.enable_browser_feature and signals.header_score < self.min_feature_score:
            logger.debug(
                "Header feature score %d below %d for %s",
                signals.header_score,
                self.min_feature_score,
                signals.path,
            )
            return AccessDecision.deny(DenyReason.BROWSER_FEATURES_MISSING)

        if self.enable_referrer and not signals.referrer and not is_landing_page(signals.path):
            return AccessDecision.deny(DenyReason.REFERRER_MISSING)

        if self.enable_js_check and not signals.has_js_cookie:
            return AccessDecision.challenge()

        return AccessDecision.allow()

    def _referrer_allowlisted(self, referrer: str | None) -> bool:
        if not referrer:
            return False
        return any(domain and domain in referrer for domain in self.allowed_ref_domains)
