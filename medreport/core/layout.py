from __future__ import annotations

from dataclasses import dataclass, replace


class LayoutError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class LayoutState:
    """Vertical cursor of a single-page composition.

    PDF coordinates grow upwards, so consuming space means lowering
    ``cursor_y``. Instances are immutable: every block receives the current
    ``cursor_y`` and the state is advanced with the value the block returns.
    """

    page_width: float
    page_height: float
    cursor_y: float

    @classmethod
    def start(cls, page_width: float, page_height: float, *, top_offset: float) -> LayoutState:
        return cls(page_width=page_width, page_height=page_height, cursor_y=page_height - top_offset)

    def advance(self, next_y: float) -> LayoutState:
        if next_y > self.cursor_y:
            raise LayoutError(f"cursor cannot move up: {self.cursor_y} -> {next_y}")
        return replace(self, cursor_y=next_y)

    def gap(self, height: float) -> LayoutState:
        if height < 0:
            raise LayoutError(f"gap must be non-negative, got {height}")
        return self.advance(self.cursor_y - height)

    def is_below(self, floor_y: float) -> bool:
        return self.cursor_y < floor_y
