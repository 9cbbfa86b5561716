"""API error responses."""

from fastapi import Request
from fastapi.responses import JSONResponse

from ..flows import DemoError


class ApiError(Exception):
    """Error returned to the caller as ``{"error", "category", "step"}``."""

    def __init__(
        self,
        status_code: int,
        error: str,
        step: str | None = None,
        category: str = "internal",
    ):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.step = step
        self.category = category

    @classmethod
    def from_error(cls, status_code: int, exc: DemoError) -> "ApiError":
        return cls(status_code, exc.message, exc.step, exc.category)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render ApiError as JSON."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "category": exc.category, "step": exc.step},
    )
