"""Rule-based board layouts (grid, grouped by type, overlap-free flow)."""
import math
from collections.abc import Sequence
from typing import Literal, NamedTuple

from sparkboard.exceptions import ValidationError
from sparkboard.models.spark import Spark

LayoutMethod = Literal['grid', 'by_type', 'spacing']

PADDING = 30
MIN_CELL = 200
DEFAULT_SIZE = 160


class Placement(NamedTuple):
    spark_id: str
    x: float
    y: float


def _size(spark: Spark) -> tuple[float, float]:
    return spark.width or DEFAULT_SIZE, spark.height or DEFAULT_SIZE


def _grid(
    sparks: Sequence[Spark],
    left: float,
    top: float,
    available_width: float
) -> tuple[list[Placement], float]:
    """Lay sparks out in a centered square-ish grid. Returns placements and the grid height."""
    cell_width = max([_size(s)[0] for s in sparks] + [MIN_CELL]) + PADDING
    cell_height = max([_size(s)[1] for s in sparks] + [MIN_CELL]) + PADDING
    cols = math.ceil(math.sqrt(len(sparks)))
    grid_width = min(cols * cell_width, available_width)
    start_x = left + max(0, (available_width - grid_width) / 2)

    placements = []
    for index, spark in enumerate(sparks):
        row, col = divmod(index, cols)
        width, height = _size(spark)
        placements.append(Placement(
            spark.id,
            start_x + col * cell_width + (cell_width - width) / 2,
            top + row * cell_height + (cell_height - height) / 2,
        ))
    rows = math.ceil(len(sparks) / cols)
    return placements, rows * cell_height


def organize_board(
    sparks: Sequence[Spark],
    method: LayoutMethod,
    viewport_width: float,
    viewport_x: float = 0,
    viewport_y: float = 0
) -> list[Placement]:
    """
    Compute new positions for sparks inside the visible viewport.

    :param sparks: Sparks to arrange
    :param method: 'grid', 'by_type' (one grid per kind-tag, stacked) or
        'spacing' (keep left-to-right order, remove overlaps)
    :param viewport_width: Width of the visible area
    :param viewport_x: Left edge of the visible area on the canvas
    :param viewport_y: Top edge of the visible area on the canvas
    :return: One placement per spark
    :raises ValidationError: If the method is unknown
    """
    if method not in ('grid', 'by_type', 'spacing'):
        raise ValidationError(f"Unknown layout method: {method}")
    if not sparks:
        return []

    left = viewport_x + PADDING
    top = viewport_y + PADDING
    available_width = viewport_width - PADDING * 2

    if method == 'grid':
        placements, _ = _grid(sparks, left, top, available_width)
        return placements

    if method == 'by_type':
        groups: dict[str | None, list[Spark]] = {}
        for spark in sparks:
            groups.setdefault(spark.type, []).append(spark)
        placements = []
        current_y = top
        for group in groups.values():
            group_placements, group_height = _grid(group, left, current_y, available_width)
            placements.extend(group_placements)
            current_y += group_height + PADDING
        return placements

    ordered = sorted(sparks, key=lambda s: (s.x, s.y))
    total_width = sum(_size(s)[0] + PADDING for s in ordered) - PADDING
    current_x = left + max(0, (available_width - total_width) / 2)
    current_y = top
    row_height = 0.0
    placements = []
    for spark in ordered:
        width, height = _size(spark)
        if current_x + width > viewport_x + viewport_width - PADDING:
            current_x = left
            current_y += row_height + PADDING
            row_height = 0.0
        placements.append(Placement(spark.id, current_x, current_y))
        current_x += width + PADDING
        row_height = max(row_height, height)
    return placements
