from typing import Final

HEADER_ROW: Final[int] = 1
FIRST_DATA_ROW: Final[int] = 2
FIRST_COLUMN: Final[int] = 1

EMPTY_CELL: Final[str] = ""

RATE_LIMIT_STATUS_CODES: Final[tuple[int, ...]] = (429, 403)
RATE_LIMIT_KEYWORDS: Final[tuple[str, ...]] = (
    "rate limit",
    "quota",
    "too many requests",
    "user rate limit",
)
