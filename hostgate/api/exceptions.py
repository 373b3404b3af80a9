"""HTTP exceptions raised by the API layer and their handlers."""
from __future__ import annotations

from typing import Any

from litestar import Request, Response
from litestar.exceptions import PermissionDeniedException
from litestar.status_codes import HTTP_403_FORBIDDEN

from hostgate.services.gate import DenyReason


class DownloadDenied(PermissionDeniedException):
    """A download was rejected by the download gate."""

    def __init__(self, reason: DenyReason) -> None:
        super().__init__(detail=reason.message, extra={"reason": reason.value})
        self.reason = reason


def download_denied_handler(_: Request[Any, Any, Any], exc: DownloadDenied) -> Response[dict[str, Any]]:
    """Render a denial with its user-facing message and reason code."""
    return Response(
        content={
            "status_code": HTTP_403_FORBIDDEN,
            "detail": exc.detail,
            "reason": exc.reason.value,
        },
        status_code=HTTP_403_FORBIDDEN,
    )
