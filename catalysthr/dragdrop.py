"""Drop-position calculation for reordering cards within a board column."""

from typing import Any, Sequence, Tuple, Union

Box = Union[Tuple[float, float], Any]


def _top_height(box: Box) -> Tuple[float, float]:
    if isinstance(box, (tuple, list)):
        return float(box[0]), float(box[1])
    return float(box.top), float(box.height)


def insertion_index(boxes: Sequence[Box], pointer_y: float) -> int:
    """
    Index at which a dragged card should be inserted.

    Args:
        boxes: (top, height) pairs, or objects with ``top``/``height``, for the
            cards already in the column (the dragged card excluded)
        pointer_y: Vertical pointer position in the same coordinates

    Returns:
        Index of the card whose midpoint is the closest one below the pointer,
        or len(boxes) to append at the end
    """
    best_index = len(boxes)
    best_offset = float("-inf")
    for i, box in enumerate(boxes):
        top, height = _top_height(box)
        offset = pointer_y - top - height / 2
        if best_offset < offset < 0:
            best_offset = offset
            best_index = i
    return best_index
