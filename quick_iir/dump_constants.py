"""
Print the constants derived for one filter configuration.

    python -m quick_iir.dump_constants --height 480 --width 640 --b0 1 --a1 -1.2 --a2 0.6
"""

import argparse

from quick_iir.block_grid import WS
from quick_iir.constants_interface import setup_constants


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--height", type=int, required=True)
    ap.add_argument("--width", type=int, required=True)
    ap.add_argument("--b0", type=float, required=True)
    ap.add_argument("--a1", type=float, required=True)
    ap.add_argument("--a2", type=float, default=None, help="omit for a first-order filter")
    ap.add_argument("--ws", type=int, default=WS)
    args = ap.parse_args(argv)

    grid, store = setup_constants(
        args.height, args.width, args.b0, args.a1, args.a2, ws=args.ws
    )
    print({"order": 1 if args.a2 is None else 2, "cols": grid.cols, "rows": grid.rows})
    for name, value in store.as_dict().items():
        print(f"{name}: {value}")
    return grid, store


if __name__ == "__main__":
    main()
