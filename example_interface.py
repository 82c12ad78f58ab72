"""
Minimal usage example for the constants interface.
"""

from quick_iir.constants_interface import setup_constants


def main():
    h, w = 480, 640

    grid, store = setup_constants(h, w, b0=0.9, a1=-0.1)
    print("order 1 grid", tuple(grid), "Alpha", float(store["c_Alpha"]))

    grid, store = setup_constants(h, w, b0=1.0, a1=-1.2, a2=0.6)
    print("order 2 grid", tuple(grid))
    for name in ("c_Af", "c_Ar", "c_Arf"):
        print(name, store[name].reshape(2, 2))


if __name__ == "__main__":
    main()
