import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import ConfigError


# -----------------------------
# Option variants
# -----------------------------

class Size(Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class OutputMode(Enum):
    MONOCHROME = "monochrome"
    COLOR = "color"


PRESET_WIDTHS = {
    Size.SMALL: 60,
    Size.MEDIUM: 100,
    Size.LARGE: 150,
}

DEFAULT_CHAR_RATIO = 0.5


def resolve_base_width(size: Size, custom_width: Optional[int] = None) -> int:
    """Return the explicit width if given, else the preset width for `size`."""
    if custom_width is not None:
        return custom_width
    return PRESET_WIDTHS[size]


# -----------------------------
# Conversion configuration
# -----------------------------

@dataclass(frozen=True)
class ConversionConfig:
    size: Size = Size.MEDIUM
    mode: OutputMode = OutputMode.COLOR
    custom_width: Optional[int] = None  # None => use the size preset
    char_ratio: float = DEFAULT_CHAR_RATIO

    def __post_init__(self):
        if not isinstance(self.size, Size):
            raise ConfigError(f"size must be a Size, got {self.size!r}")
        if not isinstance(self.mode, OutputMode):
            raise ConfigError(f"mode must be an OutputMode, got {self.mode!r}")
        if self.custom_width is not None:
            if isinstance(self.custom_width, bool) or not isinstance(self.custom_width, int):
                raise ConfigError(f"width must be an integer, got {self.custom_width!r}")
            if self.custom_width <= 0:
                raise ConfigError(f"width must be positive, got {self.custom_width}")
        if isinstance(self.char_ratio, bool) or not isinstance(self.char_ratio, (int, float)):
            raise ConfigError(f"char ratio must be a number, got {self.char_ratio!r}")
        if not math.isfinite(self.char_ratio) or self.char_ratio <= 0:
            raise ConfigError(f"char ratio must be a positive number, got {self.char_ratio}")

    @property
    def base_width(self) -> int:
        """Column count before the height is derived: custom width wins over the preset."""
        return resolve_base_width(self.size, self.custom_width)
