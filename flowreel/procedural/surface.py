"""
Drawing surface: an opaque RGB canvas (H, W, 3) float in [0, 1] with the few 2D compositing
primitives the frame renderer needs: gradients, fills, soft discs with glow, source-over and
screen blending under a global alpha. Pure numpy; Pillow only for poster snapshots.
"""
from __future__ import annotations

import re
from typing import TYPE_CHECKING, Sequence

import numpy as np

if TYPE_CHECKING:
    from PIL import Image

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

SOURCE_OVER = "source-over"
SCREEN = "screen"

RGBA = tuple[float, float, float, float]
ColorStop = tuple[float, "str | RGBA"]


def parse_color(color: str) -> tuple[float, float, float, float]:
    """CSS hex color (#rgb, #rgba, #rrggbb, #rrggbbaa) → (r, g, b, a) floats in [0, 1]."""
    m = _HEX_RE.match((color or "").strip())
    if not m:
        raise ValueError(f"Unsupported color {color!r}: expected #rgb or #rrggbb[aa]")
    digits = m.group(1)
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    channels = [int(digits[i:i + 2], 16) / 255.0 for i in range(0, len(digits), 2)]
    if len(channels) == 3:
        channels.append(1.0)
    return channels[0], channels[1], channels[2], channels[3]


def with_alpha(color: str, alpha: float) -> RGBA:
    """Color with its alpha channel replaced, alpha clamped to [0, 1]."""
    r, g, b, _ = parse_color(color)
    return r, g, b, min(1.0, max(0.0, float(alpha)))


def _as_rgba(color: "str | RGBA") -> RGBA:
    return parse_color(color) if isinstance(color, str) else tuple(color)


def _stop_arrays(stops: Sequence[ColorStop]) -> tuple[np.ndarray, np.ndarray]:
    offsets = np.array([o for o, _ in stops], dtype=np.float64)
    rgba = np.array([_as_rgba(c) for _, c in stops], dtype=np.float64)
    order = np.argsort(offsets, kind="stable")
    return offsets[order], rgba[order]


def _sample_stops(t: np.ndarray, stops) -> np.ndarray:
    """Interpolate color stops at positions t (padded at both ends) → (..., 4)."""
    offsets, rgba = _stop_arrays(stops)
    t = np.clip(t, 0.0, 1.0)
    out = np.empty(t.shape + (4,), dtype=np.float64)
    for ch in range(4):
        out[..., ch] = np.interp(t, offsets, rgba[:, ch])
    return out


class DrawingContext:
    """2D context bound to one surface. State: global alpha and composite operation."""

    def __init__(self, surface: "DrawingSurface"):
        self.surface = surface
        self.global_alpha = 1.0
        self.composite_operation = SOURCE_OVER

    def reset_state(self) -> None:
        self.global_alpha = 1.0
        self.composite_operation = SOURCE_OVER

    def clear(self) -> None:
        """Reset every pixel to opaque black."""
        self.surface.pixels[...] = 0.0

    def _pixel_grid(self, ys: slice, xs: slice) -> tuple[np.ndarray, np.ndarray]:
        y = np.arange(ys.start, ys.stop, dtype=np.float64) + 0.5
        x = np.arange(xs.start, xs.stop, dtype=np.float64) + 0.5
        return np.meshgrid(x, y)

    def _composite(self, rgb: np.ndarray, alpha, ys: slice | None = None, xs: slice | None = None) -> None:
        """Blend source color/alpha onto the region using the current operation."""
        pixels = self.surface.pixels
        ys = ys or slice(0, pixels.shape[0])
        xs = xs or slice(0, pixels.shape[1])
        dst = pixels[ys, xs]
        a = np.clip(np.asarray(alpha, dtype=np.float64) * self.global_alpha, 0.0, 1.0)
        if a.ndim == 2:
            a = a[..., np.newaxis]
        src = np.broadcast_to(np.asarray(rgb, dtype=np.float64), dst.shape)
        if self.composite_operation == SCREEN:
            blended = 1.0 - (1.0 - dst) * (1.0 - src)
        elif self.composite_operation == SOURCE_OVER:
            blended = src
        else:
            raise ValueError(f"Unsupported composite operation: {self.composite_operation}")
        pixels[ys, xs] = dst * (1.0 - a) + blended * a

    def fill_color(self, color: "str | RGBA") -> None:
        """Fill the whole surface with one (possibly translucent) color."""
        r, g, b, a = _as_rgba(color)
        self._composite(np.array([r, g, b]), a)

    def fill_linear_gradient(self, x0: float, y0: float, x1: float, y1: float, stops: Sequence[ColorStop]) -> None:
        """Fill the surface with a linear gradient along (x0, y0) → (x1, y1)."""
        h, w = self.surface.height, self.surface.width
        xx, yy = self._pixel_grid(slice(0, h), slice(0, w))
        dx, dy = x1 - x0, y1 - y0
        denom = dx * dx + dy * dy
        if denom <= 0:
            t = np.zeros_like(xx)
        else:
            t = ((xx - x0) * dx + (yy - y0) * dy) / denom
        colors = _sample_stops(t, stops)
        self._composite(colors[..., :3], colors[..., 3])

    def fill_radial_gradient(
        self,
        x0: float, y0: float, r0: float,
        x1: float, y1: float, r1: float,
        stops: Sequence[ColorStop],
    ) -> None:
        """
        Two-circle (conical) radial gradient. Each pixel takes the largest ω for which it lies on
        the circle interpolated at ω with a non-negative radius; pixels with no such ω stay untouched.
        """
        h, w = self.surface.height, self.surface.width
        xx, yy = self._pixel_grid(slice(0, h), slice(0, w))
        dcx, dcy, dr = x1 - x0, y1 - y0, r1 - r0
        pdx, pdy = xx - x0, yy - y0
        a = dcx * dcx + dcy * dcy - dr * dr
        b = pdx * dcx + pdy * dcy + r0 * dr
        c = pdx * pdx + pdy * pdy - r0 * r0

        with np.errstate(divide="ignore", invalid="ignore"):
            if abs(a) < 1e-12:
                omega = np.where(b != 0, c / (2.0 * b), np.nan)
                candidates = [omega]
            else:
                disc = b * b - a * c
                root = np.sqrt(np.where(disc >= 0, disc, np.nan))
                candidates = [(b + root) / a, (b - root) / a]
            best = np.full(xx.shape, -np.inf)
            for omega in candidates:
                ok = np.isfinite(omega) & (r0 + omega * dr >= 0)
                best = np.where(ok & (omega > best), omega, best)

        valid = np.isfinite(best)
        colors = _sample_stops(np.where(valid, best, 0.0), stops)
        alpha = np.where(valid, colors[..., 3], 0.0)
        self._composite(colors[..., :3], alpha)

    def fill_disc(
        self,
        cx: float,
        cy: float,
        radius: float,
        color: str,
        *,
        glow_color: RGBA | None = None,
        glow_blur: float = 0.0,
    ) -> None:
        """Antialiased filled circle, preceded by a gaussian glow (shadow) when glow_blur > 0."""
        h, w = self.surface.height, self.surface.width
        sigma = max(glow_blur, 0.0) / 2.0
        reach = radius + (3.0 * sigma if glow_color is not None else 0.0) + 1.0
        x_lo, x_hi = max(0, int(np.floor(cx - reach))), min(w, int(np.ceil(cx + reach)))
        y_lo, y_hi = max(0, int(np.floor(cy - reach))), min(h, int(np.ceil(cy + reach)))
        if x_lo >= x_hi or y_lo >= y_hi:
            return
        ys, xs = slice(y_lo, y_hi), slice(x_lo, x_hi)
        xx, yy = self._pixel_grid(ys, xs)
        dist = np.sqrt((xx - cx) ** 2 + (yy - cy) ** 2)

        if glow_color is not None and sigma > 0:
            gr, gg, gb, ga = glow_color
            # Center value of a gaussian-blurred disc, then gaussian falloff past the rim
            peak = 1.0 - np.exp(-(radius * radius) / (2.0 * sigma * sigma))
            outside = np.maximum(dist - radius, 0.0)
            glow = ga * peak * np.exp(-(outside * outside) / (2.0 * sigma * sigma))
            self._composite(np.array([gr, gg, gb]), glow, ys, xs)

        r, g, b, a = parse_color(color)
        coverage = np.clip(radius - dist + 0.5, 0.0, 1.0) * a
        self._composite(np.array([r, g, b]), coverage, ys, xs)


class DrawingSurface:
    """Opaque RGB drawing target owned by one generator run at a time."""

    def __init__(self, width: int = 1, height: int = 1):
        self.pixels = np.zeros((1, 1, 3), dtype=np.float64)
        self._context: DrawingContext | None = None
        self.resize(width, height)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def resize(self, width: int, height: int) -> None:
        """Reallocate to width x height (cleared to black). Dimensions must be positive."""
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface dimensions must be positive, got {width}x{height}")
        self.pixels = np.zeros((height, width, 3), dtype=np.float64)
        if self._context is not None:
            self._context.reset_state()

    def get_context(self) -> DrawingContext | None:
        """2D drawing context for this surface (one per surface, like a canvas)."""
        if self._context is None:
            self._context = DrawingContext(self)
        return self._context

    def to_frame(self) -> np.ndarray:
        """Current pixels as an RGB uint8 frame (H, W, 3)."""
        return np.clip(self.pixels * 255.0 + 0.5, 0, 255).astype(np.uint8)

    def to_image(self) -> "Image.Image":
        """Current pixels as a Pillow image (poster frames, previews)."""
        from PIL import Image

        return Image.fromarray(self.to_frame())
