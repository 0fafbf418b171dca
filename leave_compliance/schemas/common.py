"""
Shared schemas
"""
import math
from pydantic import BaseModel


class PaginationOut(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, page_size: int, total: int) -> "PaginationOut":
        return cls(page=page, page_size=page_size, total=total, total_pages=math.ceil(total / page_size) if total else 0)


class MessageOut(BaseModel):
    """Plain acknowledgement for delete / deactivate endpoints"""
    success: bool = True
    message: str
