"""
Shared pagination helpers for list endpoints.
"""


def calculate_offset(page: int, page_size: int) -> int:
    """
    Calculate database offset for pagination.

    Args:
        page: Page number (1-based)
        page_size: Number of items per page

    Returns:
        Database offset (0-based)
    """
    return (page - 1) * page_size


def calculate_total_pages(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` items."""
    if total <= 0 or page_size <= 0:
        return 0
    return (total + page_size - 1) // page_size
