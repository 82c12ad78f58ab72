"""
High-level entry point: derive and publish every constant for one filter
configuration.

    grid, store = setup_constants(h, w, b0, a1)        # first order
    grid, store = setup_constants(h, w, b0, a1, a2)    # second order

The returned grid sizes the kernel launch; the store holds the constants
under the symbol names the kernels read (``c_height``, ``c_Af``, ...).
A new image size or new coefficients means calling this again.
"""

from __future__ import annotations

from typing import Optional, Tuple

from quick_iir.block_grid import WS, BlockGrid, constants_sizes
from quick_iir.coefficients import constants_coefficients1, constants_coefficients2
from quick_iir.symbol_store import ConstantStore, SymbolTable, publish_constants


def setup_constants(
    h: int,
    w: int,
    b0: float,
    a1: float,
    a2: Optional[float] = None,
    *,
    ws: int = WS,
    store: Optional[ConstantStore] = None,
) -> Tuple[BlockGrid, ConstantStore]:
    """Size the grid and derive the order-1 (``a2 is None``) or order-2 constants.

    Args:
        h, w: image height and width.
        b0: feedforward gain.
        a1: first feedback coefficient.
        a2: second feedback coefficient, or ``None`` for a first-order filter.
        ws: block size.
        store: destination; a fresh ``SymbolTable`` when omitted.

    Returns:
        ``(grid, store)``.
    """

    sizes = constants_sizes(h, w, ws=ws)
    if a2 is None:
        coeffs = constants_coefficients1(b0, a1, ws=ws)
    else:
        coeffs = constants_coefficients2(b0, a1, a2, ws=ws)

    # Derive everything before publishing so a rejected configuration leaves
    # the store untouched.
    store = store if store is not None else SymbolTable()
    publish_constants(store, sizes, coeffs)
    return sizes.grid, store


__all__ = ["setup_constants"]
