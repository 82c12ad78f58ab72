"""
Block transfer matrices for second-order recursive filters.

A second-order recurrence carries two values across a block edge. Running the
recurrence over a whole block of ``n`` samples (with zero input) is therefore a
linear map on that pair, i.e. a 2x2 matrix. The block-parallel filter filters
every block from a zero state, then fixes up the block edges with these
matrices.

Conventions (boundary state ordering):
    forward:  (y[-2], y[-1])  ->  (y[n-2], y[n-1])
              y[i] = -L*y[i-2] - M*y[i-1]
    reverse:  (z[n], z[n+1])  ->  (z[0], z[1])
              z[i] = -L*N*z[i+1] - L*z[i+2]

The forward and reverse matrices use the closed form T = S * diag(l1^n, l2^n) * S^-1.
The roots l1, l2 may be a complex-conjugate pair, so the reconstruction runs
in complex arithmetic and the real part is returned.
"""

import torch

from quick_iir.errors import (
    DegenerateCoefficient,
    DegenerateDiscriminant,
    ImaginaryResidual,
    InvalidDimension,
    NonFiniteConstant,
)

DTYPE = torch.float64
CDTYPE = torch.complex128

# Largest imaginary magnitude accepted after reconstruction, relative to the
# largest real entry (floored at 1).
IMAG_TOL = 1e-6

# Guard cells on each side of an unrolled block (order-2 lookback/lookahead).
GUARD = 2


def mul(R, A, B):
    """
    R = A * B for 2x2 containers (tensors or nested lists, real or complex).

    The product goes through a temporary, so R may be A or B.
    """
    aux = [
        [A[0][0] * B[0][0] + A[0][1] * B[1][0], A[0][0] * B[0][1] + A[0][1] * B[1][1]],
        [A[1][0] * B[0][0] + A[1][1] * B[1][0], A[1][0] * B[0][1] + A[1][1] * B[1][1]],
    ]
    for i in range(2):
        for j in range(2):
            R[i][j] = aux[i][j]
    return R


def _check_length(n: int) -> int:
    if int(n) != n or n < 1:
        raise InvalidDimension(f"Block length must be a positive integer, got {n}.")
    return int(n)


def _discriminant_root(disc: float) -> torch.Tensor:
    if disc == 0:
        raise DegenerateDiscriminant(
            "Discriminant is zero (repeated pole); closed-form block matrix is undefined."
        )
    return torch.sqrt(torch.tensor(disc, dtype=CDTYPE))


def _eigen_reconstruct(n: int, S: torch.Tensor, iS: torch.Tensor, l1, l2) -> torch.Tensor:
    """Return real(S * diag(l1^n, l2^n) * iS), rejecting non-cancelling imaginary parts."""
    LB = torch.zeros((2, 2), dtype=CDTYPE)
    LB[0, 0] = torch.pow(l1, n)
    LB[1, 1] = torch.pow(l2, n)

    cT = torch.empty((2, 2), dtype=CDTYPE)
    mul(cT, S, LB)
    mul(cT, cT, iS)

    if not bool(torch.isfinite(cT).all()):
        raise NonFiniteConstant(f"Block matrix overflowed for n={n}: {cT.tolist()}")

    T = cT.real.clone()
    residual = cT.imag.abs().max().item()
    scale = max(1.0, T.abs().max().item())
    if residual > IMAG_TOL * scale:
        raise ImaginaryResidual(
            f"Imaginary residual {residual:.3e} exceeds tolerance {IMAG_TOL * scale:.3e}."
        )
    return T


def forward_matrix(n: int, L: float, M: float) -> torch.Tensor:
    """
    Transfer matrix of the causal recurrence y[i] = -L*y[i-2] - M*y[i-1]
    advanced ``n`` steps.

    Args:
        n: number of samples in the block.
        L: coefficient on y[i-2].
        M: coefficient on y[i-1].

    Returns:
        Real tensor of shape (2, 2).
    """
    n = _check_length(n)
    if n == 1:
        return torch.tensor([[0.0, 1.0], [-L, -M]], dtype=DTYPE)

    delta = _discriminant_root(M * M - 4 * L)

    S = torch.ones((2, 2), dtype=CDTYPE)
    S[1, 0] = -(delta + M) / 2
    S[1, 1] = (delta - M) / 2

    iS = torch.empty((2, 2), dtype=CDTYPE)
    iS[0, 0] = (delta - M) / (2 * delta)
    iS[0, 1] = -1 / delta
    iS[1, 0] = (delta + M) / (2 * delta)
    iS[1, 1] = 1 / delta

    return _eigen_reconstruct(n, S, iS, -(delta + M) / 2, (delta - M) / 2)


def reverse_matrix(n: int, L: float, N: float) -> torch.Tensor:
    """
    Transfer matrix of the anticausal recurrence z[i] = -L*N*z[i+1] - L*z[i+2]
    advanced ``n`` steps, mapping (z[n], z[n+1]) to (z[0], z[1]).
    """
    n = _check_length(n)
    if n == 1:
        return torch.tensor([[-L * N, -L], [1.0, 0.0]], dtype=DTYPE)
    if L == 0:
        raise DegenerateCoefficient("Reverse block matrix needs a non-zero L.")

    LN = L * N
    delta = _discriminant_root(L * L * N * N - 4 * L)

    # Eigenvectors are (1, 1/l) here, the reverse companion matrix has its
    # shift in the second row.
    S = torch.ones((2, 2), dtype=CDTYPE)
    S[1, 0] = (delta - LN) / (2 * L)
    S[1, 1] = -(delta + LN) / (2 * L)

    iS = torch.empty((2, 2), dtype=CDTYPE)
    iS[0, 0] = (delta + LN) / (2 * delta)
    iS[0, 1] = L / delta
    iS[1, 0] = (delta - LN) / (2 * delta)
    iS[1, 1] = -L / delta

    return _eigen_reconstruct(n, S, iS, -(delta + LN) / 2, (delta - LN) / 2)


class GuardedBlock:
    """
    Scratch buffer for one unrolled block, addressable from ``-GUARD`` to
    ``n + GUARD - 1``. Backed by ``n + 2*GUARD`` cells, all zero initially.
    """

    def __init__(self, n: int, dtype: torch.dtype = DTYPE):
        self.n = n
        self.data = torch.zeros(n + 2 * GUARD, dtype=dtype)

    def _offset(self, j: int) -> int:
        if not -GUARD <= j < self.n + GUARD:
            raise IndexError(
                f"Index {j} outside guarded block [{-GUARD}, {self.n + GUARD})."
            )
        return j + GUARD

    def __getitem__(self, j: int) -> float:
        return self.data[self._offset(j)].item()

    def __setitem__(self, j: int, value: float):
        self.data[self._offset(j)] = value

    def __len__(self) -> int:
        return self.data.shape[0]


def forward_reverse_matrix(n: int, L: float, M: float, N: float) -> torch.Tensor:
    """
    Combined forward-then-reverse block matrix, computed by unrolling both
    sweeps on the basis boundary states (real arithmetic only).

    Column i holds (b[0], b[1]) after seeding (b[-2], b[-1]) with basis vector
    e_i, sweeping forward over the block, then sweeping backward from a zero
    state past the block end.
    """
    n = _check_length(n)
    block = GuardedBlock(n)
    T = torch.empty((2, 2), dtype=DTYPE)

    for i, seed in enumerate(((1.0, 0.0), (0.0, 1.0))):
        block[-2], block[-1] = seed

        for j in range(n):
            block[j] = -L * block[j - 2] - M * block[j - 1]

        for j in range(n - 1, -1, -1):
            block[j] = (block[j] - block[j + 1] * N - block[j + 2]) * L

        T[0, i] = block[0]
        T[1, i] = block[1]

    return T


__all__ = [
    "mul",
    "forward_matrix",
    "reverse_matrix",
    "forward_reverse_matrix",
    "GuardedBlock",
    "GUARD",
    "IMAG_TOL",
]
