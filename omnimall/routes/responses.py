"""Map workflow results onto the structured HTTP error envelope."""

from fastapi import HTTPException

from omnimall.schemas.common import ActionResult

_STATUS_BY_CODE = {
    "VALIDATION_ERROR": 400,
    "NOT_FOUND": 404,
    "DEPENDENCY_ERROR": 502,
    "NOT_CONFIGURED": 503,
}


def ensure_success(result: ActionResult) -> ActionResult:
    """Return a successful result, raise HTTPException for a failed one."""
    if result.success:
        return result

    code = result.code or "DEPENDENCY_ERROR"
    raise HTTPException(
        status_code=_STATUS_BY_CODE.get(code, 500),
        detail={
            "error": {
                "code": code,
                "message": result.error or "Request failed",
                "detail": {"fields": result.field_errors} if result.field_errors else None,
            }
        },
    )
