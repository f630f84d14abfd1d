"""
_neighbor_joining.py
====================
Distance matrix → unrooted binary Branch tree by neighbor joining
(Saitou & Nei 1987), with the pruned pair search of Studier & Keppler
(1988): each row keeps its distances sorted so the scan for the minimum Q
can stop early.

Public API
----------
  parse_matrix(matrix, labels=None, backend="best") -> Branch

State layout
------------
All working state lives in flat numpy arrays indexed by *slot* 0..n-1:

  D         float64 [n, n]   working distance matrix (a copy of the input)
  row_sums  float64 [n]      sum of each live row of D
  S, I      float64/int64 [n, n]
                             each row's live distances sorted ascending, and
                             the column index of each sorted entry
  row_len   int64 [n]        number of valid entries in S[r] / I[r]
  removed   bool [n]         retired slots

When clusters in slots i and j are joined, slot i is retired and slot j
holds the new cluster.  Only row j of S/I is re-sorted; the other rows keep
their (stale) order and values, which the pruning bound tolerates.  Each
cluster also has a *label index*: 0..n-1 for the input taxa and n, n+1, ...
for internal nodes, in creation order.

The exact scan and update order is preserved because the resulting topology
depends on it when Q values tie.
"""

import logging
from typing import List, Mapping, Optional, Sequence

import numpy as np

from tidytree._backend import (
    check_numba_available,
    get_available_backends,
    get_best_backend,
    get_search_kernel,
    resolve_backend,
)
from tidytree._branch import Branch
from tidytree._context import get_backend_override
from tidytree._exceptions import MatrixError
from tidytree._logging import (
    log_backend_availability,
    log_join,
    log_matrix_summary,
    log_negative_lengths,
    log_optimization_status,
)

logger = logging.getLogger(__name__)

_status_logged = False


def _log_status_once() -> None:
    global _status_logged
    if not _status_logged:
        log_optimization_status(check_numba_available())
        log_backend_availability(get_available_backends())
        _status_logged = True


def parse_matrix(
    matrix, labels: Optional[Sequence] = None, backend: str = "best"
) -> Branch:
    """
    Infer a tree from a distance matrix by neighbor joining.

    Parameters
    ----------
    matrix : array_like, shape (n, n), or Mapping
        Symmetric, non-negative distances with a zero diagonal.  The input
        is copied and never modified.  A mapping with ``matrix`` and
        optional ``ids`` keys (the output of ``Branch.to_matrix``) is also
        accepted; its ``ids`` are used when *labels* is not given.
    labels : sequence of str, optional
        Taxon labels for the rows; defaults to '0', '1', ...
    backend : str
        'python', 'numba' or 'best'.  Overridden by ``use_backend``.

    Returns
    -------
    Branch
        Root of the inferred tree.  The root is an arbitrary point on the
        final edge (the tree is unrooted in substance) and has two children.
        Branch lengths may be negative for non-additive matrices.

    Raises
    ------
    MatrixError   if the matrix or labels violate the preconditions above.
    """
    if isinstance(matrix, Mapping):
        if labels is None:
            labels = matrix.get("ids")
        if "matrix" not in matrix:
            raise MatrixError(
                "Mapping input has no 'matrix' key.",
                suggestion="Pass {'matrix': [[...]], 'ids': [...]} or the array itself.",
            )
        matrix = matrix["matrix"]
    D = _validate_matrix(matrix)
    n = D.shape[0]
    labels = _validate_labels(labels, n)

    backend_override = get_backend_override()
    if backend_override is not None:
        backend = backend_override
    try:
        resolved_backend = resolve_backend(backend)
    except ValueError as e:
        logger.warning(str(e))
        resolved_backend = get_best_backend()

    _log_status_once()
    log_matrix_summary(n, resolved_backend)

    if n == 1:
        return Branch(id=labels[0]).fix_distances()

    search = get_search_kernel(resolved_backend)

    removed = np.zeros(n, dtype=np.bool_)
    S = np.zeros((n, n), dtype=np.float64)
    I = np.zeros((n, n), dtype=np.int64)
    row_len = np.zeros(n, dtype=np.int64)
    for r in range(n):
        _sort_row(D, r, removed, S, I, row_len)

    # Sequential sums, matching the reference summation order.
    row_sums = np.array([sum(row) for row in D.tolist()], dtype=np.float64)
    row_sum_max = max(0.0, float(row_sums.max()))

    curr_index_to_label: List[int] = list(range(n))
    label_to_node = {}
    next_index = n

    def set_up_node(label_index: int, distance: float) -> Branch:
        if label_index < n:
            node = Branch(id=labels[label_index], length=distance)
            label_to_node[label_index] = node
        else:
            node = label_to_node[label_index]
            node.set_length(distance)
        return node

    c_n = n
    while c_n > 2:
        min_i, min_j = search(
            D, S, I, row_len, row_sums, removed, n, float(c_n - 2), row_sum_max
        )
        min_i = int(min_i)
        min_j = int(min_j)

        d1 = 0.5 * D[min_i, min_j] + (row_sums[min_i] - row_sums[min_j]) / (
            2 * c_n - 4
        )
        d2 = D[min_i, min_j] - d1

        node1 = set_up_node(curr_index_to_label[min_i], float(d1))
        node2 = set_up_node(curr_index_to_label[min_j], float(d2))
        log_join(c_n, node1.id, node2.id, node1.length, node2.length)
        node3 = Branch(children=[node1, node2])

        row_sum_max = _recalculate_distance_matrix(D, row_sums, removed, min_i, min_j)
        _sort_row(D, min_j, removed, S, I, row_len)
        row_len[min_i] = 0
        c_n -= 1

        label_to_node[next_index] = node3
        curr_index_to_label[min_i] = -1
        curr_index_to_label[min_j] = next_index
        next_index += 1

    min_i, min_j = (int(k) for k in np.flatnonzero(~removed)[:2])
    half = float(D[min_i, min_j]) / 2
    node1 = set_up_node(curr_index_to_label[min_i], half)
    node2 = set_up_node(curr_index_to_label[min_j], half)

    tree = Branch(children=[node1, node2])
    tree.fix_parenthood()
    tree.fix_distances()

    log_negative_lengths([b.id for b in tree if b.length < 0])
    return tree


# ======================================================================== #
# Private helpers                                                           #
# ======================================================================== #


def _validate_matrix(matrix) -> np.ndarray:
    """Return a float64 copy of *matrix*, or raise MatrixError."""
    try:
        D = np.array(matrix, dtype=np.float64)
    except (TypeError, ValueError) as err:
        raise MatrixError(
            f"Distance matrix must be a rectangular array of numbers: {err}",
            suggestion="Pass a list of equal-length rows or a 2-D numpy array.",
        ) from err

    if D.ndim != 2 or D.shape[0] != D.shape[1]:
        raise MatrixError(
            f"Distance matrix is not square: shape {D.shape}",
            suggestion="Neighbor joining needs an n x n matrix of pairwise distances.",
        )
    if D.shape[0] == 0:
        raise MatrixError("Distance matrix is empty.")
    if not np.all(np.isfinite(D)):
        raise MatrixError("Distance matrix contains NaN or infinite values.")
    if np.any(D < 0):
        rows, cols = np.nonzero(D < 0)
        raise MatrixError(
            f"Distance matrix contains negative values (e.g. D[{rows[0]}][{cols[0]}] "
            f"= {D[rows[0], cols[0]]})."
        )
    if np.any(np.diag(D) != 0):
        raise MatrixError("Distance matrix diagonal must be zero.")
    if not np.allclose(D, D.T, rtol=1e-9, atol=1e-12):
        raise MatrixError(
            "Distance matrix is not symmetric.",
            suggestion="Average the matrix with its transpose: (D + D.T) / 2.",
        )
    return D


def _validate_labels(labels: Optional[Sequence], n: int) -> List[str]:
    if labels is None:
        return [str(i) for i in range(n)]
    labels = [str(label) for label in labels]
    if len(labels) != n:
        raise MatrixError(
            f"Got {len(labels)} labels for a {n} x {n} distance matrix."
        )
    return labels


def _sort_row(D, r, removed, S, I, row_len) -> None:
    """Rebuild S[r]/I[r]: live columns except r, stably sorted by D[r]."""
    columns = np.array(
        [c for c in range(D.shape[0]) if c != r and not removed[c]], dtype=np.int64
    )
    order = columns[np.argsort(D[r, columns], kind="stable")]
    k = order.shape[0]
    I[r, :k] = order
    S[r, :k] = D[r, order]
    row_len[r] = k


def _recalculate_distance_matrix(D, row_sums, removed, joined_1, joined_2) -> float:
    """
    Merge slot *joined_1* into slot *joined_2* in place.

    The new row is ``0.5 * (D[i, k] + D[j, k] - D[i, j])``; row sums are
    updated incrementally.  Returns the new maximum live row sum.
    """
    removed[joined_1] = True
    live = np.flatnonzero(~removed)

    d_ij = D[joined_1, joined_2]
    aux = D[joined_1, live] + D[joined_2, live]
    new_row = 0.5 * (aux - d_ij)
    row_change = -0.5 * (aux + d_ij)
    total = sum(new_row.tolist())

    D[joined_1, :] = -1.0
    D[:, joined_1] = -1.0
    D[joined_2, live] = new_row
    D[live, joined_2] = new_row
    row_sums[live] += row_change
    new_max = max(0.0, float(row_sums[live].max()))

    row_sums[joined_1] = 0.0
    row_sums[joined_2] = total
    if total > new_max:
        new_max = total
    return new_max
