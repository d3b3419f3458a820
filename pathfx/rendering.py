"""Preview rendering of paths, stamps and clock faces.

This module hands flattened polylines to Pillow so effect output can be
inspected as an image, with configurable dimensions, colors, fitting and
output format.
"""

from __future__ import annotations

import base64
import io
from dataclasses import dataclass
from typing import Literal

from PIL import Image, ImageDraw

from pathfx.canvas import path_to_point_lists, stamps_to_path
from pathfx.config import settings
from pathfx.types import Bounds, ClockFace, Path, StampInstance


def hex_to_rgba(hex_color: str, opacity: float = 1.0) -> tuple[int, int, int, int]:
    """Convert hex color and opacity to RGBA tuple."""
    hex_color = hex_color.lstrip("#")
    r, g, b = int(hex_color[0:2], 16), int(hex_color[2:4], 16), int(hex_color[4:6], 16)
    return (r, g, b, int(opacity * 255))


def image_to_base64(img: Image.Image) -> str:
    """Convert PIL Image to base64 string."""
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return base64.standard_b64encode(buffer.getvalue()).decode("utf-8")


@dataclass(frozen=True)
class RenderOptions:
    """Configuration for preview rendering.

    Attributes:
        width: Output image width in pixels
        height: Output image height in pixels
        background_color: Background color as hex string or RGBA tuple
        stroke_color: Color for paths and stamp outlines
        stamp_color: Color for stamps (defaults to stroke_color)
        stroke_width: Line width in pixels before fitting
        fit: Scale and center the geometry into the image
        padding: Margin kept free when fitting
        tolerance: Flattening tolerance (None uses settings)
        output_format: Return type - "image" (PIL), "bytes", or "base64"
        optimize_png: Enable PNG optimization (slower but smaller)
    """

    width: int = 800
    height: int = 800
    background_color: str | tuple[int, int, int, int] = "#FFFFFF"
    stroke_color: str = "#E94560"
    stamp_color: str | None = None
    stroke_width: int = 3
    fit: bool = False
    padding: int = 20
    tolerance: float | None = None
    output_format: Literal["image", "bytes", "base64"] = "bytes"
    optimize_png: bool = False

    def _parse_background(self) -> tuple[int, int, int, int]:
        """Parse background_color to RGBA tuple."""
        if isinstance(self.background_color, tuple):
            return self.background_color
        return hex_to_rgba(self.background_color, 1.0)


@dataclass
class _ScaleTransform:
    """Computed scale and offset for transforming coordinates."""

    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    def apply(self, points: list[tuple[float, float]]) -> list[tuple[float, float]]:
        """Apply scale and offset to point list."""
        if self.scale == 1.0 and self.offset_x == 0.0 and self.offset_y == 0.0:
            return points
        return [(x * self.scale + self.offset_x, y * self.scale + self.offset_y) for x, y in points]


def _union_bounds(paths: list[Path]) -> Bounds | None:
    boxes = [b for b in (path.bounds() for path in paths) if b is not None]
    if not boxes:
        return None
    return Bounds(
        left=min(b.left for b in boxes),
        top=min(b.top for b in boxes),
        right=max(b.right for b in boxes),
        bottom=max(b.bottom for b in boxes),
    )


def _compute_transform(options: RenderOptions, paths: list[Path]) -> _ScaleTransform:
    """Fit the geometry's bounds into the padded image, centered."""
    if not options.fit:
        return _ScaleTransform()
    bounds = _union_bounds(paths)
    if bounds is None:
        return _ScaleTransform()

    target_w = options.width - 2 * options.padding
    target_h = options.height - 2 * options.padding
    scales = []
    if bounds.width > 0:
        scales.append(target_w / bounds.width)
    if bounds.height > 0:
        scales.append(target_h / bounds.height)
    scale = min(scales) if scales else 1.0

    center = bounds.center
    offset_x = options.width / 2 - center.x * scale
    offset_y = options.height / 2 - center.y * scale
    return _ScaleTransform(scale=scale, offset_x=offset_x, offset_y=offset_y)


def _finish(img: Image.Image, options: RenderOptions) -> Image.Image | bytes | str:
    img = img.convert("RGB")

    # Return in requested format
    if options.output_format == "image":
        return img

    buffer = io.BytesIO()
    img.save(buffer, format="PNG", optimize=options.optimize_png)
    png_bytes = buffer.getvalue()

    if options.output_format == "base64":
        return base64.standard_b64encode(png_bytes).decode("utf-8")

    return png_bytes


def render_preview(
    paths: list[Path],
    stamps: list[StampInstance] | None = None,
    options: RenderOptions | None = None,
) -> Image.Image | bytes | str:
    """Rasterize paths and placed stamps to an image.

    Args:
        paths: Paths to stroke
        stamps: Stamp instances; each placed shape is stroked
        options: Render configuration (uses defaults if None)

    Returns:
        PIL Image, PNG bytes, or base64 string depending on options.output_format
    """
    if options is None:
        options = RenderOptions()

    stamped = stamps_to_path(stamps) if stamps else Path()
    transform = _compute_transform(options, [*paths, stamped])

    bg_rgba = options._parse_background()
    img = Image.new("RGBA", (options.width, options.height), bg_rgba)
    draw_layer = Image.new("RGBA", (options.width, options.height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(draw_layer)
    stroke_width = max(1, int(options.stroke_width * transform.scale))

    layers = [(path, options.stroke_color) for path in paths]
    layers.append((stamped, options.stamp_color or options.stroke_color))
    for path, color in layers:
        rgba = hex_to_rgba(color)
        for points in path_to_point_lists(path, options.tolerance):
            if len(points) < 2:
                continue
            draw.line(transform.apply(points), fill=rgba, width=stroke_width)

    img = Image.alpha_composite(img, draw_layer)
    return _finish(img, options)


def render_clock_face(
    face: ClockFace,
    options: RenderOptions | None = None,
) -> Image.Image | bytes | str:
    """Draw a clock face's ticks and hands with their own colors and widths.

    The image defaults to the dial's square (side 2 * radius).
    """
    if options is None:
        side = int(round(face.radius * 2))
        options = RenderOptions(width=side, height=side)

    img = Image.new("RGBA", (options.width, options.height), options._parse_background())
    draw = ImageDraw.Draw(img)

    for tick in face.ticks:
        draw.line(
            [(tick.start.x, tick.start.y), (tick.end.x, tick.end.y)],
            fill=hex_to_rgba(tick.color),
            width=max(1, int(tick.width)),
        )
    for hand in face.hands:
        draw.line(
            [(hand.start.x, hand.start.y), (hand.end.x, hand.end.y)],
            fill=hex_to_rgba(hand.color),
            width=max(1, int(hand.width)),
        )

    return _finish(img, options)


# =============================================================================
# Preset factories
# =============================================================================


def options_from_settings(
    *,
    fit: bool = True,
    output_format: Literal["image", "bytes", "base64"] = "bytes",
) -> RenderOptions:
    """Options built from the PATHFX_PREVIEW_* settings.

    - Fits the geometry into the image
    - Used by the CLI render command
    """
    return RenderOptions(
        width=settings.preview_width,
        height=settings.preview_height,
        background_color=settings.preview_background,
        stroke_color=settings.preview_stroke_color,
        stroke_width=settings.preview_stroke_width,
        fit=fit,
        padding=settings.preview_padding,
        tolerance=settings.flatten_tolerance,
        output_format=output_format,
    )
