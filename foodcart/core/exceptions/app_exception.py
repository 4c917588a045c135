from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional


class AppHttpException(HTTPException):
    """HTTP error whose body may carry a hint for the client next to ``detail``."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        solution: Optional[str] = None,
        errors: Optional[Any] = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.solution = solution
        self.errors = errors

    @property
    def content(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.detail}
        if self.solution:
            body["solution"] = self.solution
        if self.errors:
            body["errors"] = self.errors
        return body


async def app_http_exception_handler(request: Request, exc: AppHttpException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.content)
