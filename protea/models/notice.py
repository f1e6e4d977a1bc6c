"""User-facing notices and view outcomes."""

from typing import Any, Literal, Optional
from pydantic import BaseModel, Field

from protea.utils.config import AppConfig


class Notice(BaseModel):
    """Floating banner shown after an operation, dismissed automatically."""
    severity: Literal["success", "error"]
    message: str
    dismiss_after_seconds: float = Field(default_factory=lambda: AppConfig.NOTICE_DISMISS_SECONDS)

    @classmethod
    def success(cls, message: str) -> "Notice":
        return cls(severity="success", message=f"✅ {message}")

    @classmethod
    def error(cls, message: str) -> "Notice":
        return cls(severity="error", message=f"❌ {message}")


class ViewResult(BaseModel):
    """Outcome of a view operation; views never raise across their boundary."""
    ok: bool
    data: Any = None
    notice: Optional[Notice] = None
    redirect_to: Optional[str] = None

    @classmethod
    def success(cls, data: Any = None, message: Optional[str] = None) -> "ViewResult":
        return cls(ok=True, data=data, notice=Notice.success(message) if message else None)

    @classmethod
    def failure(cls, message: str) -> "ViewResult":
        return cls(ok=False, notice=Notice.error(message))

    @classmethod
    def redirect(cls, to: str, message: Optional[str] = None) -> "ViewResult":
        return cls(ok=False, redirect_to=to, notice=Notice.error(message) if message else None)
