"""Turn raw recognizer blocks into positioned single-line fragments."""

import re
from collections.abc import Mapping, Sequence
from typing import Any

from receiptdraft.domain.receipt import FragmentSet, TextFragment

from .common import LINE_VERTICAL_OFFSET, SYNTHETIC_HORIZONTAL_STEP, SYNTHETIC_VERTICAL_STEP

# Recognizers disagree on what they call the box
GEOMETRY_KEYS = ("boundingBox", "bounding", "frame")

LINE_BREAK = re.compile(r"\r\n|\r|\n")


def _number(box: Mapping[str, Any], key: str) -> float | None:
    value = box.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _axis_center(box: Mapping[str, Any], start: str, end: str, origin: str, extent: str) -> float | None:
    """
    Resolve the center along one axis from whichever coordinates are present.

    Tries, in order: start/end pair, start + extent, origin + extent,
    then any lone coordinate.
    """
    start_value = _number(box, start)
    end_value = _number(box, end)
    origin_value = _number(box, origin)
    extent_value = _number(box, extent)

    if start_value is not None and end_value is not None:
        return (start_value + end_value) / 2
    if start_value is not None and extent_value is not None:
        return start_value + extent_value / 2
    if origin_value is not None:
        return origin_value + (extent_value or 0.0) / 2
    if start_value is not None:
        return start_value
    if end_value is not None:
        return end_value
    return None


def _block_geometry(block: Mapping[str, Any]) -> Mapping[str, Any] | None:
    for key in GEOMETRY_KEYS:
        box = block.get(key)
        if isinstance(box, Mapping):
            return box
    return None


def _block_center(block: Mapping[str, Any]) -> tuple[float | None, float | None]:
    """Get the (vertical, horizontal) center of a block, None where unknown."""
    box = _block_geometry(block)
    if box is None:
        return None, None
    vertical = _axis_center(box, "top", "bottom", "y", "height")
    horizontal = _axis_center(box, "left", "right", "x", "width")
    return vertical, horizontal


def preprocess_blocks(blocks: Sequence[Mapping[str, Any] | str] | None) -> FragmentSet:
    """
    Split recognizer blocks into ordered single-line fragments.

    Blocks without a usable vertical coordinate are placed on a synthetic
    grid by block order (index * 20, index * 10). Each extra line inside a
    block is pushed down by a fixed offset, and the next synthetic block
    starts below the last line of the previous one so fragment order and
    vertical order agree.
    """
    fragments: list[TextFragment] = []
    if not blocks:
        return FragmentSet()

    next_synthetic_vertical = 0.0
    for index, block in enumerate(blocks):
        if isinstance(block, str):
            block = {"text": block}
        if not isinstance(block, Mapping):
            continue
        text = block.get("text") or ""
        if not isinstance(text, str):
            continue

        vertical, horizontal = _block_center(block)
        has_geometry = vertical is not None
        if vertical is None:
            vertical = max(float(index * SYNTHETIC_VERTICAL_STEP), next_synthetic_vertical)
            horizontal = None
        if horizontal is None:
            horizontal = float(index * SYNTHETIC_HORIZONTAL_STEP)

        line_number = 0
        for raw_line in LINE_BREAK.split(text):
            line = raw_line.strip()
            if not line:
                continue
            fragments.append(
                TextFragment(
                    text=line,
                    vertical_position=vertical + line_number * LINE_VERTICAL_OFFSET,
                    horizontal_position=horizontal,
                    has_spatial_data=has_geometry,
                )
            )
            line_number += 1

        if not has_geometry and line_number:
            next_synthetic_vertical = fragments[-1].vertical_position + SYNTHETIC_VERTICAL_STEP

    return FragmentSet(
        fragments=tuple(fragments),
        has_spatial_data=any(fragment.has_spatial_data for fragment in fragments),
    )
