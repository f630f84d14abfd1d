"""
_logging.py
===========
Logging functions for tidytree.

All functions in this module have NO side effects except logging. They take
computed data as parameters and format/emit log messages.

This separation ensures:
- Logging can be easily disabled/mocked in tests
- Computation is separate from presentation
- Clear boundaries between analysis and reporting

Loggers live under the ``tidytree`` namespace; silence the whole package with
``logging.getLogger('tidytree').setLevel(logging.WARNING)`` or the
``tidytree.quiet()`` context manager.
"""

import logging
from typing import List, Sequence


logger = logging.getLogger(__name__)

# Name lists in warnings are truncated beyond this many entries.
_MAX_LISTED = 5


# ============================================================================ #
# System and Backend Logging
# ============================================================================ #


def log_optimization_status(numba_available: bool) -> None:
    """
    Log system capabilities and optimization library availability at DEBUG
    level.

    Parameters
    ----------
    numba_available : bool
        Whether numba can be imported.
    """
    import os
    import platform

    cpu_count = os.cpu_count() or 1
    logger.debug(
        "System: %s (%s), %d CPU cores, Python %s",
        platform.machine(),
        platform.system(),
        cpu_count,
        platform.python_version(),
    )

    if numba_available:
        import numba

        logger.debug("Numba %s loaded successfully", numba.__version__)

        try:
            import llvmlite

            logger.debug("LLVM backend: llvmlite %s", llvmlite.__version__)
        except (ImportError, AttributeError):
            pass  # LLVM version unavailable
    else:
        logger.debug(
            "Numba not installed; neighbor-joining search runs as pure Python"
        )


def log_backend_availability(backends_available: List[str]) -> None:
    """
    Log which execution backends are available for the neighbor-joining
    search kernel.

    Parameters
    ----------
    backends_available : List[str]
        Available backends in preference order (e.g. ['python', 'numba']).
    """
    logger.debug("Available backends: %s", ", ".join(backends_available))
    if "numba" in backends_available:
        logger.debug("  numba: LLVM-compiled search kernel (numba.njit)")
    if "python" in backends_available:
        logger.debug("  python: unoptimized reference implementation")
    logger.debug("Default backend='best' will use: %s", backends_available[-1])


# ============================================================================ #
# Tree Construction Logging
# ============================================================================ #


def log_parse_summary(n_branches: int, n_leaves: int, max_depth: int) -> None:
    """
    Log the shape of a freshly parsed tree.

    Parameters
    ----------
    n_branches : int
        Total number of branches (leaves and internal).
    n_leaves : int
        Number of leaves.
    max_depth : int
        Largest edge count from the root to a leaf.
    """
    logger.debug(
        "Parsed Newick tree: %d branches, %d leaves, max depth %d",
        n_branches,
        n_leaves,
        max_depth,
    )


def log_matrix_summary(n_taxa: int, backend: str) -> None:
    """
    Log the start of a neighbor-joining run.

    Parameters
    ----------
    n_taxa : int
        Number of rows in the distance matrix.
    backend : str
        Resolved search backend.
    """
    logger.info("Neighbor joining %d taxa (backend=%r)", n_taxa, backend)


def log_join(
    n_active: int, label_a: str, label_b: str, length_a: float, length_b: float
) -> None:
    """
    Log a single neighbor-joining step at DEBUG level.

    Parameters
    ----------
    n_active : int
        Number of clusters before the join.
    label_a, label_b : str
        Labels of the joined clusters ('' for internal clusters).
    length_a, length_b : float
        Branch lengths assigned to the two clusters.
    """
    logger.debug(
        "  join %d: %r:%.6g + %r:%.6g",
        n_active,
        label_a,
        length_a,
        label_b,
        length_b,
    )


def log_negative_lengths(ids: Sequence[str]) -> None:
    """
    Emit a consolidated warning for negative inferred branch lengths.

    Parameters
    ----------
    ids : Sequence[str]
        Ids of the branches with negative length ('' for internal branches).
    """
    n_negative = len(ids)
    if n_negative == 0:
        return
    named = [i if i else "<internal>" for i in ids]
    if n_negative <= _MAX_LISTED:
        logger.warning(
            "%d branch(es) received a negative length from neighbor joining: %s. "
            "The distance matrix is not additive.",
            n_negative,
            ", ".join(named),
        )
    else:
        logger.warning(
            "%d branches received a negative length from neighbor joining "
            "(first %d: %s). The distance matrix is not additive.",
            n_negative,
            _MAX_LISTED,
            ", ".join(named[:_MAX_LISTED]),
        )
