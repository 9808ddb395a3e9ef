# app/schemas/common.py

import math
from typing import Any, List, Optional
from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """공통 응답 형식"""

    success: bool = Field(default=True, description="성공 여부")
    message: str = Field(default="", description="응답 메시지")
    data: Optional[Any] = Field(default=None, description="응답 데이터")
    errors: Optional[List[str]] = Field(default=None, description="에러 목록")


class Pagination(BaseModel):
    page: int = Field(description="현재 페이지")
    limit: int = Field(description="페이지 크기")
    total: int = Field(description="전체 개수")
    pages: int = Field(description="전체 페이지 수")
    has_next: bool = Field(default=False, description="다음 페이지 존재 여부")
    has_prev: bool = Field(default=False, description="이전 페이지 존재 여부")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        pages = math.ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            pages=pages,
            has_next=page < pages,
            has_prev=page > 1,
        )
