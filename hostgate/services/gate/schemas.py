"""Schemas for gate decisions - pure data, no framework dependencies."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Verdict(str, Enum):
    """Outcome of a gate evaluation."""

    ALLOW = "allow"
    DENY = "deny"
    CHALLENGE = "challenge"


class DenyReason(str, Enum):
    """Why a download was denied, one per denying check."""

    USER_AGENT_REJECTED = "user_agent_rejected"
    BROWSER_FEATURES_MISSING = "browser_features_missing"
    REFERRER_MISSING = "referrer_missing"

    @property
    def message(self) -> str:
        """User-facing explanation for the denial."""
        return DENY_MESSAGES[self]


DENY_MESSAGES: dict[DenyReason, str] = {
    DenyReason.USER_AGENT_REJECTED: "Downloads are only allowed from modern browsers.",
    DenyReason.BROWSER_FEATURES_MISSING: "Please use a modern browser to access this file.",
    DenyReason.REFERRER_MISSING: "Please reach download links through the site's pages.",
}


@dataclass(frozen=True)
class AccessDecision:
    """Result of evaluating one request against the download gate."""

    verdict: Verdict
    reason: DenyReason | None = field(default=None)

    def __post_init__(self) -> None:
        if (self.verdict is Verdict.DENY) != (self.reason is not None):
            raise ValueError("A deny reason is required for, and only for, deny decisions")

    @classmethod
    def allow(cls) -> AccessDecision:
        return cls(Verdict.ALLOW)

    @classmethod
    def deny(cls, reason: DenyReason) -> AccessDecision:
        return cls(Verdict.DENY, reason)

    @classmethod
    def challenge(cls) -> AccessDecision:
        return cls(Verdict.CHALLENGE)

    @property
    def is_allowed(self) -> bool:
        return self.verdict is Verdict.ALLOW

    @property
    def is_denied(self) -> bool:
        return self.verdict is Verdict.DENY

    @property
    def is_challenge(self) -> bool:
        return self.verdict is Verdict.CHALLENGE


@dataclass(frozen=True)
class ClassifierSignals:
    """Read-only view of the request data the gate decides on.

    Built once per evaluation and discarded afterwards.
    """

    user_agent: str | None
    referrer: str | None
    header_score: int
    has_js_cookie: bool
    path: str
    is_download: bool
