"""Download gate - request classification, no framework dependencies."""
from .gate import AccessGate, is_landing_page
from .schemas import AccessDecision, ClassifierSignals, DenyReason, Verdict

__all__ = [
    "AccessGate",
    "AccessDecision",
    "ClassifierSignals",
    "DenyReason",
    "Verdict",
    "is_landing_page",
]
