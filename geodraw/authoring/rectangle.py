"""
Rectangle authoring.

A rectangle is drawn by dragging from a fixed anchor corner; bounds are
recomputed from the anchor and the current pointer on every update, so the
box stays normalized whichever quadrant the drag moves into.

A committed, selected rectangle exposes four corner handles (sw, se, ne, nw).
Dragging one changes only the two bound fields that corner controls. An
edit that would invert the bounds is rejected up front: the stored rectangle
is left alone and the handle is reported at its last known-good position.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from geodraw.authoring.base import AuthoringContext
from geodraw.core.color import Color
from geodraw.core.events import EventType
from geodraw.core.store import ShapeStore
from geodraw.model import DrawableRectangle, DrawMode, LatLng, LatLngBounds, ShapeKind, new_shape_id


CORNERS: Tuple[str, ...] = ("sw", "se", "ne", "nw")


@dataclass(frozen=True)
class CornerHandle:
    corner: str
    position: LatLng


@dataclass
class _CornerDrag:
    corner: str
    last_good: LatLng


def corner_position(bounds: LatLngBounds, corner: str) -> LatLng:
    if corner == "sw":
        return bounds.southwest
    if corner == "se":
        return bounds.southeast
    if corner == "ne":
        return bounds.northeast
    if corner == "nw":
        return bounds.northwest
    raise ValueError(f"Unknown corner '{corner}'")


def moved_corner(bounds: LatLngBounds, corner: str, new_pos: LatLng) -> Tuple[LatLng, LatLng]:
    """(southwest, northeast) after moving `corner`; may be inverted."""
    sw, ne = bounds.southwest, bounds.northeast
    if corner == "sw":
        sw = new_pos
    elif corner == "se":
        sw = LatLng(new_pos.latitude, sw.longitude)
        ne = LatLng(ne.latitude, new_pos.longitude)
    elif corner == "ne":
        ne = new_pos
    elif corner == "nw":
        sw = LatLng(sw.latitude, new_pos.longitude)
        ne = LatLng(new_pos.latitude, ne.longitude)
    else:
        raise ValueError(f"Unknown corner '{corner}'")
    return sw, ne


class RectangleAuthoring:
    def __init__(self, ctx: AuthoringContext) -> None:
        self._ctx = ctx
        self._rectangles: ShapeStore[DrawableRectangle] = ShapeStore()
        self._drawing: Optional[DrawableRectangle] = None
        self._selected_id: Optional[str] = None
        self._drag: Optional[_CornerDrag] = None
        self._handle_overrides: Dict[str, LatLng] = {}

    @property
    def store(self) -> ShapeStore[DrawableRectangle]:
        return self._rectangles

    @property
    def rectangles(self) -> Tuple[DrawableRectangle, ...]:
        return self._rectangles.values()

    @property
    def drawing_rectangle(self) -> Optional[DrawableRectangle]:
        return self._drawing

    @property
    def is_drawing(self) -> bool:
        return self._drawing is not None

    @property
    def selected_rectangle(self) -> Optional[DrawableRectangle]:
        return self._rectangles.get(self._selected_id)

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    # -- construction --------------------------------------------------------

    def start(self, point: LatLng) -> None:
        color = self._ctx.drawing_color
        self._drawing = DrawableRectangle(
            id=new_shape_id(ShapeKind.RECTANGLE),
            bounds=LatLngBounds(southwest=point, northeast=point),
            anchor=point,
            stroke_color=color,
            fill_color=self._ctx.fill_for(color),
            stroke_width=self._ctx.config.stroke_width,
        )
        self._ctx.notify()

    def update(self, current: LatLng) -> None:
        if self._drawing is None:
            return
        self._drawing = replace(self._drawing, bounds=LatLngBounds.spanning(self._drawing.anchor, current))
        self._ctx.events.emit(EventType.RECTANGLE_UPDATED, self._drawing)
        self._ctx.notify()

    def finish(self) -> None:
        if self._drawing is None:
            return
        self._rectangles.add(self._drawing)
        self._drawing = None
        self._ctx.events.emit(EventType.RECTANGLE_DRAWN, self.rectangles)
        self._ctx.notify()

    # -- selection (rectangle mode only) ---------------------------------------

    def select_at(self, point: LatLng) -> bool:
        if self._ctx.mode != DrawMode.RECTANGLE:
            return False
        for rect in self._rectangles:
            if rect.bounds.contains(point):
                self.select(rect.id)
                return True
        self.deselect()
        return False

    def select(self, rectangle_id: str) -> None:
        if self._ctx.mode != DrawMode.RECTANGLE:
            return
        rect = self._rectangles.get(rectangle_id)
        if rect is None:
            return
        self._selected_id = rect.id
        self._drag = None
        self._handle_overrides.clear()
        self._ctx.notify()
        self._ctx.events.emit(EventType.RECTANGLE_SELECTED, rect)

    def deselect(self) -> None:
        if self._ctx.mode != DrawMode.RECTANGLE:
            return
        self.clear_selection()

    def clear_selection(self) -> None:
        if self._selected_id is None:
            return
        self._selected_id = None
        self._drag = None
        self._handle_overrides.clear()
        self._ctx.notify()

    def delete(self) -> None:
        if self._ctx.mode != DrawMode.RECTANGLE:
            return
        deleted_id = self._selected_id
        if deleted_id is None or deleted_id not in self._rectangles:
            return
        self._rectangles.remove(deleted_id)
        self._ctx.events.emit(EventType.RECTANGLE_DELETED, deleted_id)
        self.clear_selection()

    def set_color(self, rectangle_id: str, color: Color) -> None:
        rect = self._rectangles.get(rectangle_id)
        if rect is None:
            return
        updated = replace(rect, stroke_color=color, fill_color=self._ctx.fill_for(color))
        self._rectangles.replace(updated)
        self._ctx.events.emit(EventType.RECTANGLE_UPDATED, updated)
        self._ctx.notify()

    # -- corner editing --------------------------------------------------------

    def edit_handles(self) -> Tuple[CornerHandle, ...]:
        rect = self.selected_rectangle
        if rect is None:
            return ()
        return tuple(
            CornerHandle(c, self._handle_overrides.get(c, corner_position(rect.bounds, c)))
            for c in CORNERS
        )

    def start_corner_drag(self, corner: str) -> bool:
        rect = self.selected_rectangle
        if rect is None or corner not in CORNERS:
            return False
        self._drag = _CornerDrag(corner=corner, last_good=corner_position(rect.bounds, corner))
        return True

    def drag_corner(self, corner: str, new_pos: LatLng) -> bool:
        """
        Move one corner. Returns False (and snaps the handle back) when the
        result would invert the bounds.
        """
        rect = self.selected_rectangle
        if rect is None or corner not in CORNERS:
            return False

        sw, ne = moved_corner(rect.bounds, corner, new_pos)
        bounds = LatLngBounds.validate(sw, ne)
        if bounds is None:
            if self._drag is not None and self._drag.corner == corner:
                revert_to = self._drag.last_good
            else:
                revert_to = corner_position(rect.bounds, corner)
            self._handle_overrides[corner] = revert_to
            self._ctx.notify()
            return False

        updated = replace(rect, bounds=bounds)
        self._rectangles.replace(updated)
        self._handle_overrides.pop(corner, None)
        if self._drag is not None and self._drag.corner == corner:
            self._drag.last_good = new_pos
        self._ctx.notify()
        self._ctx.events.emit(EventType.RECTANGLE_UPDATED, updated)
        return True

    def end_corner_drag(self, corner: str, new_pos: LatLng) -> bool:
        ok = self.drag_corner(corner, new_pos)
        self._drag = None
        self._handle_overrides.clear()
        return ok
