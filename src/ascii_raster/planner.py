"""Work out the character grid an image is rendered into."""

import logging

from .errors import ConfigError
from .options import DEFAULT_CHAR_RATIO


def plan_dimensions(
    source_width: int,
    source_height: int,
    base_width: int,
    char_ratio: float = DEFAULT_CHAR_RATIO,
) -> tuple[int, int]:
    """
    Compute (target_width, target_height) in character cells.

    Terminal cells are taller than wide, so the image aspect ratio is scaled
    by `char_ratio`. The height is truncated toward zero, not rounded, so
    that output dimensions stay stable across releases.
    """
    logger = logging.getLogger(__name__)
    if source_width <= 0 or source_height <= 0:
        raise ConfigError(
            f"source image has degenerate size {source_width}x{source_height}"
        )

    target_width = base_width
    target_height = int((source_height / source_width) * base_width * char_ratio)

    logger.debug(
        "Planned grid: source=(%d,%d) base_width=%d char_ratio=%s -> (%d,%d)",
        source_width,
        source_height,
        base_width,
        char_ratio,
        target_width,
        target_height,
    )
    return target_width, target_height
