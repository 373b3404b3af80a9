"""Services layer - request gating and external integrations."""
from .gate import AccessGate
from .geo import GeoCache

__all__ = ["AccessGate", "GeoCache"]
