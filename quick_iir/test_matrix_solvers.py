import pytest
import torch

from quick_iir import matrix_solvers
from quick_iir.errors import DegenerateDiscriminant, ImaginaryResidual, InvalidDimension
from quick_iir.matrix_solvers import (
    GUARD,
    GuardedBlock,
    forward_matrix,
    forward_reverse_matrix,
    mul,
    reverse_matrix,
)
from quick_iir.naive_baseline import (
    apply_matrix,
    unroll_forward,
    unroll_forward_reverse,
    unroll_reverse,
)

# (L, M): complex pair, two positive real poles, two negative real poles, mixed signs
POLE_CASES = [(0.6, -1.2), (0.06, -0.5), (0.06, 0.5), (-0.2, 0.1)]
LENGTHS = [1, 2, 3, 7, 32]
STATES = [(1.0, 0.0), (0.0, 1.0), (0.3, -1.7)]


def _close(got, ref, atol=1e-5):
    return torch.allclose(
        torch.tensor(got, dtype=torch.float64), torch.tensor(ref, dtype=torch.float64), atol=atol
    )


def test_mul_aliasing():
    A = [[1, 2], [3, 4]]
    B = [[5, 6], [7, 8]]
    mul(A, A, B)
    assert A == [[19, 22], [43, 50]]

    A = [[1, 2], [3, 4]]
    mul(B, A, B)
    assert B == [[19, 22], [43, 50]]


def test_mul_complex_in_place():
    A = torch.tensor([[1 + 1j, 2], [0, 1j]], dtype=torch.complex128)
    B = torch.tensor([[1, -1j], [2, 3]], dtype=torch.complex128)
    expected = A @ B
    mul(A, A, B)
    assert torch.allclose(A, expected)


def test_single_step_closed_forms():
    for L, M in POLE_CASES:
        N = M / L
        assert torch.equal(forward_matrix(1, L, M), torch.tensor([[0.0, 1.0], [-L, -M]], dtype=torch.float64))
        assert torch.equal(reverse_matrix(1, L, N), torch.tensor([[-L * N, -L], [1.0, 0.0]], dtype=torch.float64))
        expected_rf = torch.tensor([[-L * L, -L * M], [0.0, 0.0]], dtype=torch.float64)
        assert torch.allclose(forward_reverse_matrix(1, L, M, N), expected_rf)


def test_forward_matrix_matches_unroll():
    for L, M in POLE_CASES:
        for n in LENGTHS:
            T = forward_matrix(n, L, M)
            for state in STATES:
                assert _close(apply_matrix(T, state), unroll_forward(n, L, M, state)), (L, M, n, state)


def test_reverse_matrix_matches_unroll():
    for L, M in POLE_CASES:
        N = M / L
        for n in LENGTHS:
            T = reverse_matrix(n, L, N)
            for state in STATES:
                assert _close(apply_matrix(T, state), unroll_reverse(n, L, N, state)), (L, N, n, state)


def test_forward_reverse_matrix_matches_unroll():
    for L, M in POLE_CASES:
        N = M / L
        for n in LENGTHS:
            T = forward_reverse_matrix(n, L, M, N)
            for state in STATES:
                ref = unroll_forward_reverse(n, L, M, N, state)
                assert _close(apply_matrix(T, state), ref), (L, M, N, n, state)


def test_degenerate_discriminant():
    # M^2 == 4L: repeated pole at 0.5
    with pytest.raises(DegenerateDiscriminant):
        forward_matrix(32, 0.25, -1.0)
    with pytest.raises(DegenerateDiscriminant):
        reverse_matrix(32, 0.25, -4.0)
    # a single step never needs the eigen-decomposition
    assert torch.isfinite(forward_matrix(1, 0.25, -1.0)).all()


def test_invalid_length():
    for solver, args in [
        (forward_matrix, (0.6, -1.2)),
        (reverse_matrix, (0.6, -2.0)),
        (forward_reverse_matrix, (0.6, -1.2, -2.0)),
    ]:
        with pytest.raises(InvalidDimension):
            solver(0, *args)


def test_imaginary_residual_is_rejected():
    with pytest.MonkeyPatch.context() as mp:
        mp.setattr(matrix_solvers, "IMAG_TOL", -1.0)
        with pytest.raises(ImaginaryResidual):
            forward_matrix(32, 0.6, -1.2)


def test_guarded_block_bounds():
    block = GuardedBlock(4)
    assert len(block) == 4 + 2 * GUARD
    block[-GUARD] = 1.5
    block[4 + GUARD - 1] = -2.0
    assert block[-2] == 1.5 and block[5] == -2.0
    assert block[0] == 0.0
    with pytest.raises(IndexError):
        block[-GUARD - 1]
    with pytest.raises(IndexError):
        block[4 + GUARD] = 1.0


if __name__ == "__main__":
    test_mul_aliasing()
    test_mul_complex_in_place()
    test_single_step_closed_forms()
    test_forward_matrix_matches_unroll()
    test_reverse_matrix_matches_unroll()
    test_forward_reverse_matrix_matches_unroll()
    test_degenerate_discriminant()
    test_invalid_length()
    test_imaginary_residual_is_rejected()
    test_guarded_block_bounds()
    print("Matrix solver checks passed.")
