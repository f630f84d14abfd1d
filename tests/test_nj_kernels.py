"""
test_nj_kernels.py
==================
Tests for the neighbor-joining search kernel (_nj_kernels.py) and the
backend helpers that select it (_backend.py).

The kernel is exercised directly on hand-built state arrays so that its
scan order and tie-breaking can be checked without the driver in
_neighbor_joining.py.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import pytest

from tidytree._backend import (
    check_numba_available,
    get_available_backends,
    get_backend_info,
    get_best_backend,
    get_search_kernel,
    import_cpu_kernels,
    resolve_backend,
)
from tidytree._nj_kernels import search_core


def build_state(matrix):
    """Sorted rows, index permutation and row sums for a fresh matrix."""
    D = np.array(matrix, dtype=np.float64)
    n = D.shape[0]
    S = np.zeros((n, n), dtype=np.float64)
    I = np.zeros((n, n), dtype=np.int64)
    row_len = np.zeros(n, dtype=np.int64)
    for r in range(n):
        columns = np.array([c for c in range(n) if c != r], dtype=np.int64)
        order = columns[np.argsort(D[r, columns], kind="stable")]
        I[r, : n - 1] = order
        S[r, : n - 1] = D[r, order]
        row_len[r] = n - 1
    row_sums = D.sum(axis=1)
    removed = np.zeros(n, dtype=np.bool_)
    return D, S, I, row_len, row_sums, removed


def brute_force_q_min(D, row_sums, n2):
    n = D.shape[0]
    return min(
        D[i, j] * n2 - row_sums[i] - row_sums[j]
        for i in range(n)
        for j in range(n)
        if i != j
    )


# ======================================================================== #
# search_core                                                               #
# ======================================================================== #


class TestSearchCore:
    def test_first_tie_wins(self):
        matrix = [[0, 5, 9, 9], [5, 0, 10, 10], [9, 10, 0, 8], [9, 10, 8, 0]]
        D, S, I, row_len, row_sums, removed = build_state(matrix)
        i, j = search_core(D, S, I, row_len, row_sums, removed, 4, 2.0, row_sums.max())
        assert (int(i), int(j)) == (0, 1)

    def test_initial_guess_replaced(self):
        # Q(B,C) = Q(A,D) = -14; row 0's nearest column gives only -12, and
        # row 1's nearest column (C) is met before row 3's.
        matrix = [[0, 3, 3, 3], [3, 0, 2, 4], [3, 2, 0, 4], [3, 4, 4, 0]]
        D, S, I, row_len, row_sums, removed = build_state(matrix)
        i, j = search_core(D, S, I, row_len, row_sums, removed, 4, 2.0, row_sums.max())
        assert (int(i), int(j)) == (1, 2)

    def test_removed_slots_ignored(self):
        matrix = [[0, 1, 9, 9], [1, 0, 9, 9], [9, 9, 0, 7], [9, 9, 7, 0]]
        D, S, I, row_len, row_sums, removed = build_state(matrix)
        removed[0] = True
        row_len[0] = 0
        row_sums = np.array([0.0, 18.0, 16.0, 16.0])
        i, j = search_core(D, S, I, row_len, row_sums, removed, 4, 1.0, 18.0)
        assert int(i) != 0 and int(j) != 0

    @pytest.mark.parametrize("seed", range(5))
    def test_finds_global_minimum_on_fresh_matrix(self, seed):
        rng = np.random.default_rng(seed)
        a = rng.random((9, 9))
        matrix = a + a.T
        np.fill_diagonal(matrix, 0.0)
        D, S, I, row_len, row_sums, removed = build_state(matrix)
        n2 = 7.0
        i, j = search_core(D, S, I, row_len, row_sums, removed, 9, n2, row_sums.max())
        q = D[i, j] * n2 - row_sums[i] - row_sums[j]
        assert q == pytest.approx(brute_force_q_min(D, row_sums, n2))


# ======================================================================== #
# Backend helpers                                                           #
# ======================================================================== #


class TestBackendHelpers:
    def test_python_always_available(self):
        backends = get_available_backends()
        assert backends[0] == "python"
        assert ("numba" in backends) == check_numba_available()

    def test_best_backend(self):
        assert get_best_backend() == get_available_backends()[-1]
        assert resolve_backend("best") == get_best_backend()

    def test_resolve_unknown(self):
        with pytest.raises(ValueError):
            resolve_backend("cuda")

    def test_backend_info(self):
        info = get_backend_info()
        assert set(info) == {"numba_available", "backends", "best_backend"}
        assert isinstance(info["numba_available"], bool)

    def test_python_kernel_is_search_core(self):
        assert get_search_kernel("python") is search_core

    @pytest.mark.skipif(check_numba_available(), reason="numba is installed")
    def test_numba_kernel_missing(self):
        assert import_cpu_kernels() == (False, None)
        with pytest.raises(ValueError):
            get_search_kernel("numba")

    @pytest.mark.numba
    def test_numba_kernel_matches_python(self):
        pytest.importorskip("numba")
        ok, kernel = import_cpu_kernels()
        assert ok
        assert get_search_kernel("numba") is kernel
        for seed in range(5):
            rng = np.random.default_rng(seed)
            a = rng.random((10, 10))
            matrix = a + a.T
            np.fill_diagonal(matrix, 0.0)
            state = build_state(matrix)
            args = state + (10, 8.0, float(state[4].max()))
            assert tuple(int(k) for k in kernel(*args)) == tuple(
                int(k) for k in search_core(*args)
            )
