"""Pagination value object."""
import math
from dataclasses import dataclass


@dataclass(frozen=True)
class PaginationInfo:
    """Page window over a result set.

    ``total_pages`` is always derived locally; upstream page counts are not
    trusted because the field is often missing.
    """
    page_no: int
    num_of_rows: int
    total_count: int
    total_pages: int

    @classmethod
    def calculate(cls, num_of_rows: int, page_no: int, total_count: int) -> "PaginationInfo":
        if num_of_rows <= 0:
            raise ValueError(f"num_of_rows must be positive, got {num_of_rows}")
        return cls(
            page_no=page_no,
            num_of_rows=num_of_rows,
            total_count=total_count,
            total_pages=math.ceil(total_count / num_of_rows),
        )

    @classmethod
    def empty(cls, num_of_rows: int, page_no: int = 1) -> "PaginationInfo":
        return cls(page_no=page_no, num_of_rows=num_of_rows, total_count=0, total_pages=0)

    def to_dict(self) -> dict:
        return {
            "page_no": self.page_no,
            "num_of_rows": self.num_of_rows,
            "total_count": self.total_count,
            "total_pages": self.total_pages,
        }
