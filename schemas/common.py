"""
schemas/common.py

- Shared schemas reused across the project (Pydantic v2)
- Contents:
  1) Error response standard: ErrorDetail, ErrorResponse
  2) Pagination meta: Pagination, pagination(), MetaInfo, make_meta()
"""

from __future__ import annotations

from datetime import datetime, timezone
from math import ceil
from typing import Optional

from fastapi import Query
from pydantic import BaseModel, Field, ConfigDict


# =========================================================
# 1) Error response standard
# =========================================================

class ErrorDetail(BaseModel):
    """Smallest unit carrying an error code/message"""
    code: str = Field(..., description="Error code (e.g. NOT_FOUND, VALIDATION_ERROR, INTERNAL_ERROR)")
    message: str = Field(..., description="Human readable message")

class ErrorResponse(BaseModel):
    """
    Body returned by the global error handlers (middlewares/error_handler.py)
    """
    success: bool = False
    error: ErrorDetail
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Response time (UTC)"
    )

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 2) Pagination request/meta
# =========================================================

class Pagination(BaseModel):
    """
    Common paging parameters for list endpoints
    - page: starts at 1
    - size: 1~200
    - sort: "lastname,asc" / "created_at,desc"
    """
    page: int = Field(1, ge=1, description="Current page (1-based)")
    size: int = Field(20, ge=1, le=200, description="Items per page")
    sort: Optional[str] = Field(default=None, description='Sort key (e.g. "lastname,asc")')

    model_config = ConfigDict(extra="ignore")


def pagination(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=200),
    sort: Optional[str] = Query(None),
) -> Pagination:
    """Dependency form of Pagination: out-of-range values fail as 422 like any other query param."""
    return Pagination(page=page, size=size, sort=sort)


class MetaInfo(BaseModel):
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    size: int = Field(..., ge=1)
    pages: int = Field(..., ge=1)
    sort: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


def make_meta(total: int, page: int, size: int, sort: Optional[str] = None) -> MetaInfo:
    """
    Build paging meta
    - pages is at least 1 even when total is 0
    """
    pages = max(1, ceil(total / max(1, size)))
    return MetaInfo(total=total, page=page, size=size, pages=pages, sort=sort)
