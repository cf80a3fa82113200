"""Helpers for turning 1-based blocks into Sheets API ranges.

Functions:
    block_to_a1: Block coordinates to an A1 range string.
    block_to_grid_range: Block coordinates to a GridRange.
    pad_block: Pad a ragged 2D list out to a full rectangle.
"""

from typing import Any

from gspread.utils import rowcol_to_a1

from sheet_query.shared.consts import EMPTY_CELL

from .schemas import GridRange


def block_to_a1(start_row: int, start_col: int, num_rows: int, num_cols: int) -> str:
    """Convert a 1-based block to A1 notation.

    Args:
        start_row: First row, 1-based.
        start_col: First column, 1-based.
        num_rows: Height of the block, at least 1.
        num_cols: Width of the block, at least 1.

    Returns:
        A range such as ``"A2:C4"``.

    Example:
        >>> block_to_a1(2, 1, 3, 3)
        'A2:C4'
    """
    if num_rows < 1 or num_cols < 1:
        raise ValueError(f"Empty block: {num_rows}x{num_cols}")

    start = rowcol_to_a1(start_row, start_col)
    end = rowcol_to_a1(start_row + num_rows - 1, start_col + num_cols - 1)
    return f"{start}:{end}"


def block_to_grid_range(
    sheet_id: int, start_row: int, start_col: int, num_rows: int, num_cols: int
) -> GridRange:
    """Convert a 1-based block to a 0-based, end-exclusive GridRange.

    Example:
        >>> grid = block_to_grid_range(0, 3, 1, 1, 4)
        >>> grid.startRowIndex, grid.endRowIndex
        (2, 3)
    """
    return GridRange(
        sheetId=sheet_id,
        startRowIndex=start_row - 1,
        endRowIndex=start_row - 1 + num_rows,
        startColumnIndex=start_col - 1,
        endColumnIndex=start_col - 1 + num_cols,
    )


def pad_block(values: list[list[Any]], num_rows: int, num_cols: int) -> list[list[Any]]:
    """Return ``values`` as exactly ``num_rows`` x ``num_cols``, filling with ''.

    The Sheets API drops trailing empty rows and cells, so reads come back
    ragged.
    """
    result = []
    for r in range(num_rows):
        row = list(values[r][:num_cols]) if r < len(values) else []
        row.extend([EMPTY_CELL] * (num_cols - len(row)))
        result.append(row)
    return result
