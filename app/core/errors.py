from __future__ import annotations

from typing import Literal

from fastapi import status

ErrorKind = Literal[
    "configuration",
    "validation",
    "upstream_timeout",
    "upstream_rejected",
    "upstream_error",
]

ERROR_KIND_STATUS: dict[str, int] = {
    "configuration": status.HTTP_503_SERVICE_UNAVAILABLE,
    "validation": status.HTTP_400_BAD_REQUEST,
    "upstream_timeout": status.HTTP_504_GATEWAY_TIMEOUT,
    "upstream_rejected": status.HTTP_502_BAD_GATEWAY,
    "upstream_error": status.HTTP_502_BAD_GATEWAY,
}


class SummarizeError(RuntimeError):
    def __init__(self, message: str, *, kind: ErrorKind = "upstream_error"):
        super().__init__(message)
        self.kind = kind


class AuthServiceError(RuntimeError):
    def __init__(self, message: str, *, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(message)
        self.status_code = status_code


class HistoryStoreError(RuntimeError):
    pass


def status_for_kind(kind: str | None) -> int:
    if not kind:
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return ERROR_KIND_STATUS.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
