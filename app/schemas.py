import re
from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

T = TypeVar("T")

# bcrypt only looks at the first 72 bytes of a password.
PASSWORD_MAX_BYTES = 72

_PASSWORD_RULES = (
    (re.compile(r"[A-Z]"), "Password must contain an uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain a lowercase letter"),
    (re.compile(r"\d"), "Password must contain a number"),
    (re.compile(r"[^A-Za-z0-9]"), "Password must contain a special character"),
)


# --- Auth ---

class RegisterRequest(BaseModel):
    username: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8)

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
        for pattern, message in _PASSWORD_RULES:
            if not pattern.search(v):
                raise ValueError(message)
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


# --- User ---

class UserUpdate(BaseModel):
    username: str = Field(min_length=2, max_length=50)
    email: EmailStr


class UserPatch(BaseModel):
    username: str | None = Field(None, min_length=2, max_length=50)
    email: EmailStr | None = None


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class RegisterResponse(BaseModel):
    message: str
    user: UserResponse


class LoginResponse(BaseModel):
    message: str
    user: UserResponse
    token: str


# --- Category ---

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)


class CategoryPatch(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1, max_length=500)


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: str
    created_at: datetime | None = None


# --- Article ---

class ArticleCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    body: str = Field(min_length=1, max_length=5000)
    category_id: int = Field(gt=0)


class ArticlePatch(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=100)
    body: str | None = Field(None, min_length=1, max_length=5000)
    category_id: int | None = Field(None, gt=0)


class ArticleResponse(BaseModel):
    id: int
    title: str
    body: str
    category_id: int
    category_name: str
    submitter_id: int
    submitter_name: str
    created_at: datetime | None = None


# --- Comment ---

class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=500)
    article_id: int = Field(gt=0)


class CommentPatch(BaseModel):
    content: str | None = Field(None, min_length=1, max_length=500)
    article_id: int | None = Field(None, gt=0)


class CommentResponse(BaseModel):
    id: int
    content: str
    article_id: int
    user_id: int
    user_name: str
    created_at: datetime | None = None


# --- Pagination ---

class Page(BaseModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int
    pages: int
