import math
from dataclasses import dataclass
from typing import Any

from domain.exceptions.valuation import RenderError

from .sanitize import (
    clamp_float,
    clamp_int,
    escape_xml,
    format_number,
    is_truthy,
    sanitize_color,
)

DEFAULT_GRADIENT = ("#ff3b30", "#ff9500", "#ffcc00", "#34c759", "#007aff", "#af52de")
DEFAULT_FONT = "Arial Rounded MT Bold, Helvetica Rounded, Arial, sans-serif"
DEFAULT_TEXT = "PYQ"
MAX_TEXT_LENGTH = 12

GRADIENT_DIRECTIONS = {
    "horizontal": 0,
    "vertical": 90,
    "diagonal": 45,
    "diagonal2": 135,
}

SHADOW_TARGETS = ("ring", "text", "both")


@dataclass(frozen=True)
class AvatarOptions:
    """Fully clamped and sanitised avatar ring parameters."""

    size: int = 256
    ring_width: int = 18
    ring_padding: int = 8
    text: str = DEFAULT_TEXT
    text_size: int = 64
    text_color: str = "#ffffff"
    font: str = DEFAULT_FONT
    gradient: tuple[str, ...] = DEFAULT_GRADIENT
    background: str | None = None
    gradient_angle: float = 45
    glow: bool = False
    glow_color: str = "rgba(255,255,255,0.7)"
    glow_blur: float = 6
    glow_opacity: float = 0.7
    shadow: str = ""
    shadow_color: str = "rgba(0,0,0,0.25)"
    shadow_dx: float = 0
    shadow_dy: float = 6
    shadow_blur: float = 8

    @property
    def radius(self) -> float:
        return self.size / 2 - self.ring_width / 2 - self.ring_padding

    @classmethod
    def from_query(cls, params: dict[str, Any]) -> "AvatarOptions":
        """Build options from raw query parameters (camelCase keys)."""
        gradient = tuple(
            color
            for color in (sanitize_color(item) for item in str(params.get("gradient") or "").split(","))
            if color
        )
        background = sanitize_color(params.get("background"))
        if background in ("transparent", "none"):
            background = None

        return cls(
            size=clamp_int(params.get("size"), 256, 64, 1024),
            ring_width=clamp_int(params.get("ringWidth"), 18, 2, 128),
            ring_padding=clamp_int(params.get("ringPadding"), 8, 0, 128),
            text=str(params.get("text") or DEFAULT_TEXT)[:MAX_TEXT_LENGTH],
            text_size=clamp_int(params.get("textSize"), 64, 10, 256),
            text_color=sanitize_color(params.get("textColor")) or "#ffffff",
            font=str(params.get("font") or DEFAULT_FONT),
            gradient=gradient if len(gradient) >= 2 else DEFAULT_GRADIENT,
            background=background,
            gradient_angle=resolve_gradient_angle(
                params.get("gradientAngle"), params.get("gradientDirection")
            ),
            glow=is_truthy(params.get("glow")),
            glow_color=sanitize_color(params.get("glowColor")) or "rgba(255,255,255,0.7)",
            glow_blur=clamp_float(params.get("glowBlur"), 6, 0, 64),
            glow_opacity=clamp_float(params.get("glowOpacity"), 0.7, 0, 1),
            shadow=str(params.get("shadow") or "").lower(),
            shadow_color=sanitize_color(params.get("shadowColor")) or "rgba(0,0,0,0.25)",
            shadow_dx=clamp_float(params.get("shadowDx"), 0, -50, 50),
            shadow_dy=clamp_float(params.get("shadowDy"), 6, -50, 50),
            shadow_blur=clamp_float(params.get("shadowBlur"), 8, 0, 64),
        )


def resolve_gradient_angle(gradient_angle: Any = None, gradient_direction: Any = None) -> float:
    if gradient_direction:
        angle = GRADIENT_DIRECTIONS.get(str(gradient_direction).lower())
        if angle is not None:
            return angle
    return clamp_float(gradient_angle, 45, 0, 360)


def _gradient_stops(colors: tuple[str, ...]) -> str:
    last = len(colors) - 1
    return "".join(
        f'<stop offset="{math.floor(index / last * 100 + 0.5)}%" stop-color="{escape_xml(color)}"/>'
        for index, color in enumerate(colors)
    )


def build_avatar_svg(options: AvatarOptions) -> str:
    radius = options.radius
    if radius <= 0:
        raise RenderError("size, ringWidth and ringPadding leave no room for the ring (radius <= 0)")

    safe_text = escape_xml(options.text)
    rad = math.radians(options.gradient_angle)
    x1 = f"{50 - math.cos(rad) * 50:.2f}"
    y1 = f"{50 - math.sin(rad) * 50:.2f}"
    x2 = f"{50 + math.cos(rad) * 50:.2f}"
    y2 = f"{50 + math.sin(rad) * 50:.2f}"

    size = format_number(options.size)
    center = format_number(options.size / 2)
    r = format_number(radius)
    ring_width = format_number(options.ring_width)

    bg_rect = ""
    if options.background:
        bg_rect = f'<rect width="{size}" height="{size}" fill="{escape_xml(options.background)}"/>'

    glow_circle = ""
    if options.glow:
        glow_circle = (
            f'<circle cx="{center}" cy="{center}" r="{r}" fill="none" '
            f'stroke="{escape_xml(options.glow_color)}" stroke-width="{ring_width}" '
            f'opacity="{format_number(options.glow_opacity)}" filter="url(#glow)"/>'
        )

    ring_filter = ' filter="url(#shadow)"' if options.shadow in ("ring", "both") else ""
    text_filter = ' filter="url(#shadow)"' if options.shadow in ("text", "both") else ""

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 {size} {size}" role="img" aria-label="{safe_text}">
  <defs>
    <linearGradient id="ring" x1="{x1}%" y1="{y1}%" x2="{x2}%" y2="{y2}%">
      {_gradient_stops(options.gradient)}
    </linearGradient>
    <filter id="glow" x="-50%" y="-50%" width="200%" height="200%">
      <feGaussianBlur stdDeviation="{format_number(options.glow_blur)}" />
    </filter>
    <filter id="shadow" x="-50%" y="-50%" width="200%" height="200%">
      <feDropShadow dx="{format_number(options.shadow_dx)}" dy="{format_number(options.shadow_dy)}" stdDeviation="{format_number(options.shadow_blur)}" flood-color="{escape_xml(options.shadow_color)}" />
    </filter>
  </defs>
  {bg_rect}
  {glow_circle}
  <circle cx="{center}" cy="{center}" r="{r}" fill="none" stroke="url(#ring)" stroke-width="{ring_width}"{ring_filter}/>
  <text x="{center}" y="{center}" text-anchor="middle" dominant-baseline="middle"
        font-size="{options.text_size}" font-weight="700" font-family="{escape_xml(options.font)}"
        fill="{escape_xml(options.text_color)}"{text_filter}>{safe_text}</text>
</svg>"""
