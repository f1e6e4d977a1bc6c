"""Profile and auth user models."""

from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator


class AuthUser(BaseModel):
    """Authenticated identity as returned by Supabase auth."""
    id: str = Field(..., description="Auth user ID (uuid)")
    email: Optional[str] = Field(None, description="Login email")
    user_metadata: dict[str, Any] = Field(default_factory=dict, description="Signup metadata")

    @classmethod
    def from_supabase(cls, user: Any) -> "AuthUser":
        """Build from a gotrue ``User`` object or a plain dict."""
        if isinstance(user, dict):
            return cls.model_validate(user)
        return cls(
            id=str(user.id),
            email=getattr(user, "email", None),
            user_metadata=getattr(user, "user_metadata", None) or {},
        )

    @property
    def metadata_name(self) -> Optional[str]:
        name = self.user_metadata.get("name") or self.user_metadata.get("full_name")
        return name.strip() if isinstance(name, str) and name.strip() else None


class Profile(BaseModel):
    """Display identity record in the profiles table."""
    id: str = Field(..., description="Profile ID, equal to the auth user ID")
    email: Optional[str] = Field(None, description="Email address")
    name: Optional[str] = Field(None, description="Display name")
    full_name: Optional[str] = Field(None, description="Full name")
    is_admin: bool = Field(default=False, description="Admin capability flag")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    persisted: bool = Field(default=True, exclude=True, description="False for unsaved fallbacks")

    @field_validator("is_admin", mode="before")
    @classmethod
    def _null_is_not_admin(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def display_name(self) -> str:
        return self.name or self.full_name or self.email or "Unknown User"
