"""Pagination arithmetic and human-readable sizes for document listings."""

from __future__ import annotations

import math
from typing import Dict, Union

FILE_SIZE_UNITS = ("B", "KB", "MB", "GB")


def calculate_pagination(total: int, page: int, limit: int) -> Dict[str, Union[int, bool]]:
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    return {
        "current_page": page,
        "total_pages": total_pages,
        "has_next_page": page < total_pages,
        "has_previous_page": page > 1,
    }


def format_file_size(size_bytes: int) -> str:
    """Format a byte count as ``"1.5 KB"`` style text, capped at gigabytes."""
    size = float(size_bytes)
    unit_index = 0
    while size >= 1024 and unit_index < len(FILE_SIZE_UNITS) - 1:
        size /= 1024
        unit_index += 1
    return f"{size:.1f} {FILE_SIZE_UNITS[unit_index]}"
