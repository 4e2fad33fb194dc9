"""Pydantic schemas for the Authors resource."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field

NAME_MAX_LENGTH = 100


class AuthorCreate(BaseModel):
    """Request body for creating (POST) or replacing (PUT) an author."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Name of the author, not exceeding 100 characters.",
        examples=["Jac Wright"],
    )
    email: EmailStr = Field(
        ...,
        description="Email address of the author.",
        examples=["jacwright@gmail.com"],
    )

    model_config = ConfigDict(str_strip_whitespace=True)


class AuthorPatch(BaseModel):
    """Request body for a partial update (PATCH).

    Both fields are optional; at least one must be supplied for the update
    to change anything.
    """

    name: str | None = Field(
        default=None,
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="New name of the author, not exceeding 100 characters.",
    )
    email: EmailStr | None = Field(
        default=None,
        description="New email address of the author.",
    )

    model_config = ConfigDict(str_strip_whitespace=True)


class Author(BaseModel):
    """Author record as stored and returned by the API."""

    id: int = Field(..., description="Store-assigned author id.", examples=[1])
    name: str = Field(..., description="Name of the author.")
    email: str = Field(..., description="Email address of the author.")
