"""ASCII Raster - Render images as (optionally colored) ASCII art."""

__version__ = "0.1.0"

"""
The CLI entry point is wrapped lazily so that `python -m ascii_raster.cli`
does not find the submodule already in `sys.modules` and trigger a runpy
warning.
"""


def main(*args, **kwargs):
    from .cli import main as _m

    return _m(*args, **kwargs)


__all__ = [
    "main",
]
