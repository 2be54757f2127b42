"""
Pydantic models for request/response validation.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiBase(BaseModel):
    """Shared base — allows construction by Python name or alias, and from ORM rows."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


# ── User Models ─────────────────────────────────────────────────────

class UserCreate(ApiBase):
    """Inbound account payload (camelCase on the wire)."""
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    display_name: Optional[str] = Field(default=None, alias="displayName")
    email: str
    username: str
    password: str = Field(..., min_length=1)


class UserResponse(ApiBase):
    """Public view of an account. Never carries the password."""
    id: int
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    display_name: str = Field(..., alias="displayName")
    email: str
    username: str
    created: Optional[datetime] = None


# ── Article Models ──────────────────────────────────────────────────

class ArticleCreate(ApiBase):
    """
    Inbound article payload.

    The blank-title rule lives on the ORM model and is checked on save,
    so a blank title is accepted here.
    """
    title: str = ""
    content: str = ""


class ArticleOwner(ApiBase):
    id: int
    display_name: str = Field(..., alias="displayName")


class ArticleResponse(ApiBase):
    id: int
    created: Optional[datetime] = None
    title: str
    content: str
    user: Optional[ArticleOwner] = None
