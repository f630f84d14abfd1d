"""
_nj_kernels.py
==============
Pure array kernel for the neighbor-joining pair search.

This module contains ONLY the computational kernel and must not import other
project modules or numba itself.  ``search_core`` takes numpy arrays and plain
scalars, so the same function body runs as pure Python (backend 'python')
or compiled with ``numba.njit`` (backend 'numba', see ``_backend``).

Exported Functions
------------------
search_core
    Find the pair (i, j) minimising the neighbor-joining Q criterion.
"""

import numpy as np


def search_core(D, S, I, row_len, row_sums, removed, n_rows, n2, row_sum_max):
    """
    Pruned search for the pair minimising
    ``Q(i, j) = n2 * D[i, j] - row_sums[i] - row_sums[j]``.

    Parameters
    ----------
    D           : float64[n, n]   Current distances (rows of retired slots unused).
    S           : float64[n, n]   Per-row distances sorted ascending (padded).
    I           : int64[n, n]     Column index of each entry of ``S``.
    row_len     : int64[n]        Number of valid entries in each row of ``S``/``I``.
    row_sums    : float64[n]      Live row sums.
    removed     : bool[n]         True for retired slots.
    n_rows      : int             n.
    n2          : float           Active cluster count minus two.
    row_sum_max : float           Upper bound on any live row sum.

    Returns
    -------
    (int, int)   Row and column of the first strict minimum found.

    Notes
    -----
    The scan order is fixed: an initial guess from each row's nearest
    column, then rows in index order and columns in ascending sorted
    distance.  A row is abandoned once
    ``S[r, c] * n2 - row_sums[r] - row_sum_max`` exceeds the best Q so far.
    Ties keep the earlier candidate, which makes the output topology
    reproducible.
    """
    q_min = np.inf
    min_i = -1
    min_j = -1

    # Initial guess for q_min
    for r in range(n_rows):
        if removed[r] or row_len[r] == 0:
            continue
        c2 = I[r, 0]
        if removed[c2]:
            continue
        q = D[r, c2] * n2 - row_sums[r] - row_sums[c2]
        if q < q_min:
            q_min = q
            min_i = r
            min_j = c2

    for r in range(n_rows):
        if removed[r]:
            continue
        for c in range(row_len[r]):
            c2 = I[r, c]
            if removed[c2]:
                continue
            if S[r, c] * n2 - row_sums[r] - row_sum_max > q_min:
                break
            q = D[r, c2] * n2 - row_sums[r] - row_sums[c2]
            if q < q_min:
                q_min = q
                min_i = r
                min_j = c2

    return min_i, min_j
