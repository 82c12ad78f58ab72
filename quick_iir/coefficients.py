"""
Filter-coefficient constants consumed by the block-parallel recursive filter.

First order (one carried value per block edge):
    The block fix-up blends block-local results with carried boundary values
    using geometric (and alternating-geometric) series of the pole ``Linf``.

Second order (two carried values):
    The fix-up applies 2x2 block transfer matrices, see ``matrix_solvers``.

Both derivers are pure: they return a frozen bag of named values and never
touch the constant store. ``symbol_store.publish_constants`` does the publish.
"""

from dataclasses import dataclass
from typing import Dict

import torch
from einops import rearrange

from quick_iir.block_grid import WS
from quick_iir.errors import DegenerateCoefficient, NonFiniteConstant, UnstableFilter
from quick_iir.matrix_solvers import (
    CDTYPE,
    DTYPE,
    forward_matrix,
    forward_reverse_matrix,
    reverse_matrix,
)


def _check_block_size(ws: int):
    if int(ws) != ws or ws < 1:
        raise UnstableFilter(f"Block size must be a positive integer, got ws={ws}.")


def _check_finite(name: str, value):
    finite = torch.isfinite(torch.as_tensor(value, dtype=DTYPE)).all()
    if not bool(finite):
        raise NonFiniteConstant(f"{name} is not finite: {value}")


@dataclass(frozen=True)
class FirstOrderConstants:
    iR: float
    Linf: float
    signrevprodLinf: torch.Tensor  # (-Linf)^(ws-1-i)
    prodLinf: torch.Tensor  # Linf^(i+1)
    stm: float
    svm: float
    alpha: float
    delta_x_tail: torch.Tensor  # (-Linf)^(ws-j)
    delta_y: torch.Tensor

    def symbols(self) -> Dict[str, object]:
        return {
            "c_SignRevProdLinf": self.signrevprodLinf,
            "c_ProdLinf": self.prodLinf,
            "c_iR1": self.iR,
            "c_Linf1": self.Linf,
            "c_Stm": self.stm,
            "c_Svm": self.svm,
            "c_Alpha": self.alpha,
            "c_Delta_x_tail": self.delta_x_tail,
            "c_Delta_y": self.delta_y,
        }


@dataclass(frozen=True)
class SecondOrderConstants:
    iR: float
    Linf: float
    Minf: float
    Ninf: float
    Llast2: float
    Af: torch.Tensor
    Ar: torch.Tensor
    Arf: torch.Tensor

    def symbols(self) -> Dict[str, object]:
        return {
            "c_iR2": self.iR,
            "c_Linf2": self.Linf,
            "c_Minf": self.Minf,
            "c_Ninf": self.Ninf,
            "c_Llast2": self.Llast2,
            "c_Af": rearrange(self.Af, "i j -> (i j)"),
            "c_Ar": rearrange(self.Ar, "i j -> (i j)"),
            "c_Arf": rearrange(self.Arf, "i j -> (i j)"),
        }


def constants_coefficients1(b0: float, a1: float, *, ws: int = WS) -> FirstOrderConstants:
    """
    Derive the order-1 constants for gain ``b0`` and feedback ``a1``.

    Args:
        b0: feedforward gain.
        a1: feedback coefficient; ``Linf = a1`` must satisfy 0 < |Linf| < 1.
        ws: block size.

    Returns:
        FirstOrderConstants, vectors of length ``ws`` in float64.
    """
    _check_block_size(ws)
    Linf = float(a1)
    if not abs(Linf) < 1:
        raise UnstableFilter(f"First-order filter needs |Linf| < 1, got Linf={Linf}.")
    if Linf == 0:
        raise DegenerateCoefficient("First-order filter needs a non-zero feedback a1.")

    iR = b0 * b0 * b0 * b0 / Linf / Linf

    # Running products of -Linf: [(-Linf)^1, ..., (-Linf)^ws]
    neg_powers = torch.cumprod(torch.full((ws,), -Linf, dtype=DTYPE), dim=0)
    signrevprodLinf = torch.cat([torch.ones(1, dtype=DTYPE), neg_powers[:-1]]).flip(0)
    delta_x_tail = neg_powers.flip(0)
    prodLinf = torch.cumprod(torch.full((ws,), Linf, dtype=DTYPE), dim=0)

    Linf2 = Linf * Linf
    alpha = Linf2 * (1 - Linf2 ** ws) / (1 - Linf2)
    stm = (-1 if ws & 1 else 1) * Linf ** ws

    delta_y = torch.empty(ws, dtype=DTYPE)
    sign = -1 if ws & 1 else 1
    for j in range(ws - 1, -1, -1):
        delta_y[j] = sign * Linf ** (2 + j) * (1 - Linf ** (2 * (ws + 1 - j))) / (1 - Linf2)
        sign = -sign

    _check_finite("iR1", iR)

    return FirstOrderConstants(
        iR=iR,
        Linf=Linf,
        signrevprodLinf=signrevprodLinf,
        prodLinf=prodLinf,
        stm=stm,
        svm=stm,
        alpha=alpha,
        delta_x_tail=delta_x_tail,
        delta_y=delta_y,
    )


def _max_pole_magnitude(L: float, M: float) -> float:
    """Largest |root| of l^2 + M*l + L."""
    delta = torch.sqrt(torch.tensor(M * M - 4 * L, dtype=CDTYPE))
    roots = torch.stack([(-M + delta) / 2, (-M - delta) / 2])
    return roots.abs().max().item()


def constants_coefficients2(
    b0: float, a1: float, a2: float, *, ws: int = WS
) -> SecondOrderConstants:
    """
    Derive the order-2 constants for gain ``b0`` and feedbacks ``a1``, ``a2``.

    Both poles of l^2 + a1*l + a2 must lie strictly inside the unit circle.
    """
    _check_block_size(ws)
    a1, a2 = float(a1), float(a2)
    if a2 == 0:
        raise DegenerateCoefficient("Second-order filter needs a non-zero feedback a2.")

    Linf, Minf, Ninf = a2, a1, a1 / a2
    if not abs(Linf) < 1:
        raise UnstableFilter(f"Second-order filter needs |Linf| < 1, got Linf={Linf}.")
    pole = _max_pole_magnitude(Linf, Minf)
    if not pole < 1:
        raise UnstableFilter(
            f"Second-order filter has a pole of magnitude {pole:.6f} (a1={a1}, a2={a2})."
        )

    iR = b0 * b0 * b0 * b0 / Linf / Linf
    _check_finite("iR2", iR)

    return SecondOrderConstants(
        iR=iR,
        Linf=Linf,
        Minf=Minf,
        Ninf=Ninf,
        Llast2=Linf,
        Af=forward_matrix(ws, Linf, Minf),
        Ar=reverse_matrix(ws, Linf, Ninf),
        Arf=forward_reverse_matrix(ws, Linf, Minf, Ninf),
    )


__all__ = [
    "FirstOrderConstants",
    "SecondOrderConstants",
    "constants_coefficients1",
    "constants_coefficients2",
]
