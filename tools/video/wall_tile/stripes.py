"""Stripe definitions, the ``position: color`` text format and edit helpers."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Sequence, Tuple

from PIL import ImageColor

LOG = logging.getLogger("wall_tile_tool.stripes")

RGBA = Tuple[int, int, int, int]

DEFAULT_WALL_COLOR = "#3b82f6"
NEW_STRIPE_COLOR = "#6b7280"
DEFAULT_STRIPES_TEXT = "0: #ef4444\n0.4: #3b82f6\n0.7: #10b981"


def parse_color(value: str) -> RGBA:
    """Convert a hex string or CSS color name into an RGBA tuple."""

    rgb = ImageColor.getrgb(value.strip())
    if len(rgb) == 3:
        return (rgb[0], rgb[1], rgb[2], 255)
    return (rgb[0], rgb[1], rgb[2], rgb[3])


def color_to_hex(color: RGBA) -> str:
    r, g, b, a = color
    if a == 255:
        return f"#{r:02x}{g:02x}{b:02x}"
    return f"#{r:02x}{g:02x}{b:02x}{a:02x}"


@dataclass(frozen=True)
class Stripe:
    """A horizontal band starting at ``position`` (0 = wall base, 1 = top)."""

    position: float
    color: RGBA

    @classmethod
    def from_hex(cls, position: float, color: str) -> "Stripe":
        return cls(position=float(position), color=parse_color(color))

    @property
    def hex_color(self) -> str:
        return color_to_hex(self.color)

    def as_row(self) -> tuple[str, str]:
        return (f"{self.position:.2f}", self.hex_color)


def default_stripe() -> Stripe:
    return Stripe(position=0.0, color=parse_color(DEFAULT_WALL_COLOR))


def sort_stripes(stripes: Iterable[Stripe]) -> List[Stripe]:
    """Sort ascending by position.

    Ties are broken by color so that stripes sharing a position resolve the
    same way regardless of the order the caller listed them in.
    """

    return sorted(stripes, key=lambda s: (s.position, s.color))


def stripe_segments(stripes: Sequence[Stripe]) -> List[tuple[float, float, RGBA]]:
    """Return ``(bottom, top, color)`` for every stripe.

    Each stripe runs up to the next stripe's position and the topmost one runs
    to 1.0. An empty list yields the single default stripe so a wall always has
    something to fill.
    """

    ordered = sort_stripes(stripes) or [default_stripe()]
    segments: List[tuple[float, float, RGBA]] = []
    for idx, stripe in enumerate(ordered):
        top = ordered[idx + 1].position if idx + 1 < len(ordered) else 1.0
        segments.append((stripe.position, top, stripe.color))
    return segments


# ---------------------------------------------------------------------------
# Text format
# ---------------------------------------------------------------------------


def parse_stripes(text: str) -> List[Stripe]:
    """Parse ``position: color`` lines, silently dropping malformed ones."""

    stripes: List[Stripe] = []
    for line_no, line in enumerate(text.strip().splitlines(), start=1):
        parts = [part.strip() for part in line.split(":")]
        if len(parts) != 2:
            if line.strip():
                LOG.debug("Skipping stripe line %d: expected 'position: color'", line_no)
            continue
        try:
            position = float(parts[0])
        except ValueError:
            LOG.debug("Skipping stripe line %d: bad position %r", line_no, parts[0])
            continue
        if position != position:  # NaN
            LOG.debug("Skipping stripe line %d: position is NaN", line_no)
            continue
        try:
            color = parse_color(parts[1])
        except ValueError:
            LOG.debug("Skipping stripe line %d: unknown color %r", line_no, parts[1])
            continue
        stripes.append(Stripe(position=position, color=color))

    stripes.sort(key=lambda s: s.position)
    return stripes


def format_stripes(stripes: Iterable[Stripe]) -> str:
    return "\n".join(f"{stripe.position:g}: {stripe.hex_color}" for stripe in stripes)


# ---------------------------------------------------------------------------
# Editing helpers
# ---------------------------------------------------------------------------


def add_stripe(stripes: Sequence[Stripe], color: str = NEW_STRIPE_COLOR) -> List[Stripe]:
    """Append a stripe a tenth above the last one, capped at 0.9."""

    position = min(stripes[-1].position + 0.1, 0.9) if stripes else 0.0
    return [*stripes, Stripe(position=round(position, 4), color=parse_color(color))]


def remove_stripe(stripes: Sequence[Stripe], index: int) -> List[Stripe]:
    return [stripe for idx, stripe in enumerate(stripes) if idx != index]


def update_stripe(stripes: Sequence[Stripe], index: int, *, position: float | None = None, color: str | None = None) -> List[Stripe]:
    """Return a re-sorted copy with one stripe's position and/or color changed."""

    updated = list(stripes)
    stripe = updated[index]
    if position is not None:
        stripe = replace(stripe, position=float(position))
    if color is not None:
        stripe = replace(stripe, color=parse_color(color))
    updated[index] = stripe
    updated.sort(key=lambda s: s.position)
    return updated


__all__ = [
    "DEFAULT_STRIPES_TEXT",
    "DEFAULT_WALL_COLOR",
    "NEW_STRIPE_COLOR",
    "RGBA",
    "Stripe",
    "add_stripe",
    "color_to_hex",
    "default_stripe",
    "format_stripes",
    "parse_color",
    "parse_stripes",
    "remove_stripe",
    "sort_stripes",
    "stripe_segments",
    "update_stripe",
]
