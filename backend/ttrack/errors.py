from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class ApiError(HTTPException):
    """HTTP error with a machine readable code and separate client/diagnostic messages."""

    def __init__(
        self,
        status_code: int,
        code: str,
        external: str,
        internal: Optional[str] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=external)
        self.code = code
        self.external = external
        self.internal = internal or external

    def payload(self) -> Dict[str, Any]:
        return {"Code": self.code, "External": self.external, "Internal": self.internal}


def invalid_id(value: Any) -> ApiError:
    return ApiError(
        status.HTTP_400_BAD_REQUEST,
        "INVALID-ID",
        "no id defined",
        f"id {value!r} is not a uuid",
    )


def not_found(entity: str, record_id: str, code: str = "NOT-FOUND") -> ApiError:
    return ApiError(
        status.HTTP_404_NOT_FOUND,
        code,
        f"{entity} was not found",
        f"{entity} {record_id} does not exist",
    )
