import torch
from typing import Sequence, Tuple


# Naive sequential unrolls (for reference & testing)


def unroll_forward(
    n: int, L: float, M: float, state: Sequence[float]
) -> Tuple[float, float]:
    """
    Advances y[i] = -L*y[i-2] - M*y[i-1] naively over ``n`` samples.

    Args:
        n: number of samples in the block.
        L, M: recurrence coefficients.
        state: boundary state (y[-2], y[-1]).

    Returns:
        The boundary state (y[n-2], y[n-1]) at the end of the block.
    """
    y = torch.zeros(n + 2, dtype=torch.float64)
    y[0], y[1] = state[0], state[1]  # y[-2], y[-1]
    for t in range(2, n + 2):
        y[t] = -L * y[t - 2] - M * y[t - 1]
    return y[n].item(), y[n + 1].item()


def unroll_reverse(
    n: int, L: float, N: float, state: Sequence[float]
) -> Tuple[float, float]:
    """
    Advances z[i] = -L*N*z[i+1] - L*z[i+2] backwards over ``n`` samples.

    Args:
        n: number of samples in the block.
        L, N: recurrence coefficients.
        state: boundary state (z[n], z[n+1]) past the block end.

    Returns:
        The boundary state (z[0], z[1]) at the start of the block.
    """
    z = torch.zeros(n + 2, dtype=torch.float64)
    z[n], z[n + 1] = state[0], state[1]
    for t in reversed(range(n)):
        z[t] = -L * N * z[t + 1] - L * z[t + 2]
    return z[0].item(), z[1].item()


def unroll_forward_reverse(
    n: int, L: float, M: float, N: float, state: Sequence[float]
) -> Tuple[float, float]:
    """
    Runs the forward recurrence over a block from ``state`` = (y[-2], y[-1]),
    then the reverse pass y'[t] = L*(y[t] - N*y'[t+1] - y'[t+2]) from a zero
    state past the block end. Returns (y'[0], y'[1]).
    """
    y = [0.0] * (n + 2)
    y_prev2, y_prev1 = float(state[0]), float(state[1])
    for t in range(n):
        y[t] = -L * y_prev2 - M * y_prev1
        y_prev2, y_prev1 = y_prev1, y[t]

    # y[n], y[n+1] stay zero: the reverse pass starts from rest.
    for t in reversed(range(n)):
        y[t] = L * (y[t] - N * y[t + 1] - y[t + 2])
    return y[0], y[1]


def apply_matrix(T: torch.Tensor, state: Sequence[float]) -> Tuple[float, float]:
    """T @ state for a 2x2 block matrix and a boundary pair."""
    v = T @ torch.tensor([float(state[0]), float(state[1])], dtype=T.dtype)
    return v[0].item(), v[1].item()
