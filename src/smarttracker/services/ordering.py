"""Drag-and-drop reordering of the habit list."""

from __future__ import annotations

from typing import Optional, Sequence

from ..errors import ValidationError
from ..models.habit import Habit

DROP_POSITIONS = ("before", "after")


def _index_of(habits: Sequence[Habit], habit_id: int) -> int:
    for index, habit in enumerate(habits):
        if habit.id == habit_id:
            return index
    return -1


def reorder_habits(
    habits: Sequence[Habit],
    dragged_id: int,
    target_id: int,
    position: str,
) -> Optional[list[Habit]]:
    """Move ``dragged_id`` next to ``target_id`` and densely reassign ``order``.

    ``habits`` must already be sorted by ``order``. Returns the new sequence, or
    None when nothing moves (same id or an unknown id). Insertion is adjusted by
    one when the dragged item sat before the target, since removing it shifts
    the target left.
    """

    if position not in DROP_POSITIONS:
        raise ValidationError(f"Invalid drop position: {position}")
    if dragged_id == target_id:
        return None

    dragged_index = _index_of(habits, dragged_id)
    target_index = _index_of(habits, target_id)
    if dragged_index == -1 or target_index == -1:
        return None

    moved_before_target = dragged_index < target_index
    result = list(habits)
    moved = result.pop(dragged_index)
    if position == "after":
        insert_index = target_index + (0 if moved_before_target else 1)
    else:
        insert_index = target_index - (1 if moved_before_target else 0)
    result.insert(insert_index, moved)

    for index, habit in enumerate(result):
        habit.order = index
    return result


__all__ = ["DROP_POSITIONS", "reorder_habits"]
