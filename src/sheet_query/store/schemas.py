"""Data schemas for the Google Sheets binding.

Classes:
    GridRange: A rectangular block of cells as the Sheets API expects it.
"""

from pydantic import BaseModel, Field


class GridRange(BaseModel):
    """A rectangular block of cells in one worksheet.

    Indices are 0-based and the end indices are exclusive, the same as Python
    slices. This is the shape of the ``range`` object inside ``deleteRange``
    and other ``batchUpdate`` requests.

    Attributes:
        sheetId: Numeric id of the worksheet (not its title).
        startRowIndex: First row, inclusive.
        endRowIndex: Last row, exclusive.
        startColumnIndex: First column, inclusive.
        endColumnIndex: Last column, exclusive.

    Example:
        >>> # Row 3, columns A:D of worksheet 0
        >>> GridRange(
        ...     sheetId=0,
        ...     startRowIndex=2,
        ...     endRowIndex=3,
        ...     startColumnIndex=0,
        ...     endColumnIndex=4,
        ... )
    """

    sheetId: int = Field(default=0, description="Worksheet id")
    startRowIndex: int = Field(description="Start row (inclusive, 0-based)")
    endRowIndex: int = Field(description="End row (exclusive, 0-based)")
    startColumnIndex: int = Field(description="Start column (inclusive, 0-based)")
    endColumnIndex: int = Field(description="End column (exclusive, 0-based)")
