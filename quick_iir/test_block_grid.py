import pytest

from quick_iir.block_grid import WS, BlockGrid, constants_sizes
from quick_iir.errors import InvalidDimension


def test_grid_rounds_up():
    sizes = constants_sizes(100, 50, ws=32)
    assert sizes.grid == BlockGrid(cols=2, rows=4)
    assert sizes.symbols() == {"c_height": 100, "c_width": 50, "c_m_size": 4, "c_n_size": 2}


def test_grid_exact_multiple():
    assert constants_sizes(64, 96).grid == BlockGrid(cols=96 // WS, rows=64 // WS)
    assert constants_sizes(1, 1).grid == BlockGrid(cols=1, rows=1)
    assert constants_sizes(33, 17, ws=16).grid == BlockGrid(cols=2, rows=3)


def test_grid_rejects_non_positive():
    for h, w in [(0, 10), (10, 0), (-5, 10), (10, -1)]:
        with pytest.raises(InvalidDimension):
            constants_sizes(h, w)
    with pytest.raises(InvalidDimension):
        constants_sizes(10, 10, ws=0)


if __name__ == "__main__":
    test_grid_rounds_up()
    test_grid_exact_multiple()
    test_grid_rejects_non_positive()
    print("Block grid checks passed.")
