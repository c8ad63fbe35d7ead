import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import ConfigError, ImageLoadError
from .options import ConversionConfig, OutputMode
from .planner import plan_dimensions

ESC = "\x1b"

# Lightest to densest.
ASCII_CHARS = " .:-=+*#%@"

# Rec. 601 luma weights scaled to integers so the floor is exact.
_LUMA_WEIGHTS = np.array([299, 587, 114], dtype=np.uint32)

LOG = logging.getLogger(__name__)


# -----------------------------
# Loading / resampling
# -----------------------------

def load_image(path: str | os.PathLike) -> Image.Image:
    """Open and fully decode `path` as an RGB image."""
    try:
        with Image.open(path) as img:
            img.load()
            rgb = img.convert("RGB")
    except FileNotFoundError as exc:
        raise ImageLoadError(path, "no such file") from exc
    except UnidentifiedImageError as exc:
        raise ImageLoadError(path, "unsupported or unrecognised image format") from exc
    except Image.DecompressionBombError as exc:
        raise ImageLoadError(path, str(exc)) from exc
    except (OSError, SyntaxError, ValueError) as exc:
        # Pillow reports truncated or corrupt data through these.
        raise ImageLoadError(path, str(exc) or type(exc).__name__) from exc

    LOG.debug("Loaded %s: size=%s mode=%s", path, rgb.size, rgb.mode)
    return rgb


def resample(img: Image.Image, width: int, height: int) -> Image.Image:
    """Nearest-neighbor resize to exactly (width, height)."""
    return img.resize((width, height), resample=Image.Resampling.NEAREST)


# -----------------------------
# Luminance / glyphs
# -----------------------------

def luminance(pixels: np.ndarray) -> np.ndarray:
    """
    pixels: ...x3 (or ...x4, alpha ignored) array of 0..255 channel values
    returns: ... array of floor(0.299 R + 0.587 G + 0.114 B) as uint8
    """
    rgb = np.asarray(pixels)[..., :3].astype(np.uint32)
    lum = (rgb @ _LUMA_WEIGHTS) // 1000
    return np.clip(lum, 0, 255).astype(np.uint8)


def glyph_index(lum):
    """Map luminance 0..255 onto an index into ASCII_CHARS (0..9)."""
    if isinstance(lum, np.ndarray):
        return lum.astype(np.uint32) * (len(ASCII_CHARS) - 1) // 255
    return int(lum) * (len(ASCII_CHARS) - 1) // 255


def pixel_to_ascii(lum: int) -> str:
    return ASCII_CHARS[glyph_index(lum)]


def colorize(glyph: str, r: int, g: int, b: int) -> str:
    """Wrap `glyph` in a 24-bit foreground color escape and a reset."""
    return f"{ESC}[38;2;{r};{g};{b}m{glyph}{ESC}[0m"


# -----------------------------
# Rendering
# -----------------------------

def render_row(pixels: np.ndarray, y: int, mode: OutputMode) -> str:
    """Render row `y` of an HxWx3 pixel array. Reads nothing outside pixels[y]."""
    row = pixels[y]
    indices = glyph_index(luminance(row))

    if mode is OutputMode.MONOCHROME:
        return "".join(ASCII_CHARS[i] for i in indices)

    parts = []
    for (r, g, b), i in zip(row[:, :3].tolist(), indices.tolist()):
        parts.append(colorize(ASCII_CHARS[i], r, g, b))
    return "".join(parts)


def render(
    pixels: np.ndarray, mode: OutputMode, max_workers: Optional[int] = None
) -> str:
    """
    Render every row of `pixels` and join them top to bottom, one newline
    after each row.

    Rows are independent, so they are mapped over a thread pool;
    `executor.map` yields results in submission order regardless of which
    worker finishes first. `max_workers=1` renders in the calling thread.
    """
    height = pixels.shape[0]
    if height == 0:
        return ""

    if max_workers == 1:
        lines = [render_row(pixels, y, mode) for y in range(height)]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            lines = list(executor.map(lambda y: render_row(pixels, y, mode), range(height)))

    return "".join(line + "\n" for line in lines)


# -----------------------------
# Pipeline
# -----------------------------

def convert_image(
    img: Image.Image, config: ConversionConfig, max_workers: Optional[int] = None
) -> str:
    """Plan, resample and render an already decoded image."""
    t0 = time.perf_counter()
    src_w, src_h = img.size
    if src_w <= 0 or src_h <= 0:
        raise ConfigError(f"source image has degenerate size {src_w}x{src_h}")

    target_w, target_h = plan_dimensions(src_w, src_h, config.base_width, config.char_ratio)
    if target_h == 0:
        LOG.warning(
            "Image %dx%d is too wide for %d columns at char ratio %s; nothing to render",
            src_w,
            src_h,
            target_w,
            config.char_ratio,
        )
        return ""

    if img.mode != "RGB":
        img = img.convert("RGB")
    resized = resample(img, target_w, target_h)
    pixels = np.asarray(resized, dtype=np.uint8)
    LOG.debug("Resampled to %dx%d", target_w, target_h)

    art = render(pixels, config.mode, max_workers=max_workers)
    LOG.debug("Rendered %d rows in %.3fs (mode=%s)", target_h, time.perf_counter() - t0, config.mode.value)
    return art


def convert_file(
    path: str | os.PathLike, config: ConversionConfig, max_workers: Optional[int] = None
) -> str:
    """Load `path` and render it according to `config`."""
    return convert_image(load_image(path), config, max_workers=max_workers)
