"""Shared state handed to every authoring controller."""

from __future__ import annotations

from typing import Optional

from geodraw.core.color import Color
from geodraw.core.config import DrawingConfig
from geodraw.core.events import ChangeNotifier, EventBus
from geodraw.model import DrawMode


class AuthoringContext:
    """
    The pieces of session state that cut across shape kinds: current mode,
    current drawing color, configuration and the two notification channels.

    Only the mode state machine (DrawingController) changes `mode`.
    """

    def __init__(
        self,
        config: Optional[DrawingConfig] = None,
        *,
        notifier: Optional[ChangeNotifier] = None,
        events: Optional[EventBus] = None,
    ) -> None:
        self.config = config or DrawingConfig()
        self.notifier = notifier or ChangeNotifier()
        self.events = events or EventBus()
        self.mode = DrawMode.NONE
        self.drawing_color: Color = self.config.drawing_color

    def fill_for(self, stroke: Color) -> Color:
        return stroke.with_alpha(self.config.fill_alpha)

    def notify(self) -> None:
        self.notifier.notify_listeners()
