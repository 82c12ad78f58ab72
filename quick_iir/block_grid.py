"""
Block grid sizing: how many WS x WS blocks cover an image.
"""

from dataclasses import dataclass
from typing import Dict, NamedTuple

from quick_iir.errors import InvalidDimension

# Samples per block (one parallel unit along a scanline).
WS = 32


class BlockGrid(NamedTuple):
    cols: int
    rows: int


@dataclass(frozen=True)
class GridConstants:
    height: int
    width: int
    grid: BlockGrid

    def symbols(self) -> Dict[str, int]:
        return {
            "c_height": self.height,
            "c_width": self.width,
            "c_m_size": self.grid.rows,
            "c_n_size": self.grid.cols,
        }


def _blocks(extent: int, ws: int) -> int:
    return (extent + ws - 1) // ws


def constants_sizes(h: int, w: int, *, ws: int = WS) -> GridConstants:
    """
    Size the block grid for an ``h`` x ``w`` image.

    Args:
        h: image height in samples.
        w: image width in samples.
        ws: block size.

    Returns:
        GridConstants with ``grid = (ceil(w/ws), ceil(h/ws))``.
    """
    if ws <= 0:
        raise InvalidDimension(f"Block size must be positive, got ws={ws}.")
    if h <= 0 or w <= 0:
        raise InvalidDimension(f"Image size must be positive, got h={h}, w={w}.")
    return GridConstants(int(h), int(w), BlockGrid(cols=_blocks(w, ws), rows=_blocks(h, ws)))


__all__ = ["WS", "BlockGrid", "GridConstants", "constants_sizes"]
