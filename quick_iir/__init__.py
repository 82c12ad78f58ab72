from quick_iir.block_grid import WS, BlockGrid, constants_sizes
from quick_iir.coefficients import constants_coefficients1, constants_coefficients2
from quick_iir.constants_interface import setup_constants
from quick_iir.symbol_store import ConstantStore, SymbolTable, publish_constants

__all__ = [
    "WS",
    "BlockGrid",
    "constants_sizes",
    "constants_coefficients1",
    "constants_coefficients2",
    "setup_constants",
    "ConstantStore",
    "SymbolTable",
    "publish_constants",
]
