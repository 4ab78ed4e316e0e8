from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from .config import EngineConfig


@dataclass(slots=True)
class LabelAnchor:
    """Top-left corner and size of a large label box, in screen pixels."""
    x: float
    y: float
    width: float
    height: float

    def contains(self, px: float, py: float) -> bool:
        return (self.x <= px <= self.x + self.width and
                self.y <= py <= self.y + self.height)

    @property
    def attach_point(self):
        """Where the connector line meets the box (top centre)."""
        return self.x + self.width / 2.0, self.y


class LabelLayout:
    """
    Smoothed anchors for hovered/selected labels.

    Anchors are created on first use at the ideal spot (centred under the
    marker) and then trail the ideal spot by ``label_ease`` of the remaining
    gap each frame. Anchors for points that lose focus stay in the map until
    they are reused or the scene is reset.
    """

    def __init__(self, settings: EngineConfig):
        self.ease     = settings.label_ease
        self.offset_y = settings.label_offset_y
        self._anchors: Dict[str, LabelAnchor] = {}

    def ideal(self, marker_x: float, marker_y: float, width: float):
        return marker_x - width / 2.0, marker_y + self.offset_y

    def place(self, name: str, marker_x: float, marker_y: float,
              width: float, height: float) -> LabelAnchor:
        ix, iy = self.ideal(marker_x, marker_y, width)
        anchor = self._anchors.get(name)
        if anchor is None:
            anchor = LabelAnchor(ix, iy, width, height)
            self._anchors[name] = anchor
            return anchor
        anchor.x += (ix - anchor.x) * self.ease
        anchor.y += (iy - anchor.y) * self.ease
        anchor.width  = width
        anchor.height = height
        return anchor

    def anchor_for(self, name: str) -> Optional[LabelAnchor]:
        return self._anchors.get(name)

    def active(self, names: Iterable[Optional[str]]) -> Dict[str, LabelAnchor]:
        """Anchors for the given names that exist (hover and selection)."""
        out = {}
        for n in names:
            if n is not None and n in self._anchors:
                out[n] = self._anchors[n]
        return out

    def clear(self):
        self._anchors.clear()

    def __len__(self) -> int:
        return len(self._anchors)

    def __contains__(self, name: str) -> bool:
        return name in self._anchors
