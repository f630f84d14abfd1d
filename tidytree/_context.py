"""
_context.py
===========
Context managers for tidytree.

Provides clean, Pythonic context managers for temporarily changing state:
- Logging control (suppress/change levels)
- Warning control (suppress specific warnings)
- Backend selection (force specific neighbor-joining backend)

All context managers properly restore state on exit, even if exceptions occur.
"""

import logging
import warnings
from contextlib import contextmanager
from typing import Optional, Type


# Module-level state for backend override
_backend_override = None


# ============================================================================ #
# Logging Context Managers
# ============================================================================ #


@contextmanager
def suppress_logger(logger_name: str, level: int = logging.CRITICAL):
    """
    Temporarily raise the level of one tidytree module logger.

    Narrower than ``quiet``: use it to mute, say, the per-join DEBUG lines of
    neighbor joining while keeping the parser's summary.

    Parameters
    ----------
    logger_name : str
        Logger to change, e.g. 'tidytree._neighbor_joining' or
        'tidytree._newick'.
    level : int, default logging.CRITICAL
        Level applied inside the block.  ``logging.ERROR`` also hides the
        negative branch length warning.

    Examples
    --------
    >>> with suppress_logger('tidytree._newick'):
    ...     trees = [parse_newick(nwk) for nwk in newicks]

    >>> with suppress_logger('tidytree._neighbor_joining', logging.ERROR):
    ...     tree = parse_matrix(noisy_matrix, labels)

    Notes
    -----
    The previous level is restored on exit, also when the block raises
    (for example a ``MatrixError``), so nested blocks unwind in order.
    """
    logger = logging.getLogger(logger_name)
    original_level = logger.level

    try:
        logger.setLevel(level)
        yield
    finally:
        logger.setLevel(original_level)


@contextmanager
def quiet(level: int = logging.CRITICAL):
    """
    Temporarily suppress all tidytree logging.

    Every module logger is a child of the ``tidytree`` logger, so raising
    its level silences the whole package.

    Parameters
    ----------
    level : int, default logging.CRITICAL
        Temporary logging level.

    Examples
    --------
    >>> with quiet():
    ...     tree = parse_matrix(matrix, labels)

    >>> # Show only warnings (e.g. negative branch lengths)
    >>> with quiet(logging.WARNING):
    ...     tree = parse_matrix(matrix, labels)
    """
    with suppress_logger("tidytree", level):
        yield


# ============================================================================ #
# Warning Context Managers
# ============================================================================ #


@contextmanager
def suppress_warnings(
    category: Optional[Type[Warning]] = None, message: str = ""
):
    """
    Temporarily ignore Python warnings raised inside the block.

    tidytree reports through logging, but the numba backend can emit
    ``NumbaPerformanceWarning`` the first time the search kernel is
    compiled, and numpy may warn on degenerate matrices.

    Parameters
    ----------
    category : Type[Warning] or None, default None
        Warning class to ignore.  If None, every warning is ignored.
    message : str, default ""
        Regular expression the start of the warning text must match.

    Examples
    --------
    >>> from numba.core.errors import NumbaPerformanceWarning
    >>> with suppress_warnings(NumbaPerformanceWarning):
    ...     tree = parse_matrix(matrix, labels, backend='numba')

    Notes
    -----
    The filter list is saved and restored with ``warnings.catch_warnings``.
    """
    with warnings.catch_warnings():
        if category is None:
            warnings.filterwarnings("ignore", message=message)
        else:
            warnings.filterwarnings("ignore", message=message, category=category)
        yield


# ============================================================================ #
# Backend Context Managers
# ============================================================================ #


@contextmanager
def use_backend(backend: str):
    """
    Temporarily force a specific backend for neighbor joining.

    Parameters
    ----------
    backend : str
        Backend to use. Valid options:
        - 'python': Pure Python (slow, always available)
        - 'numba': JIT-compiled search kernel (requires numba)
        - 'best': Use best available (default behavior)

    Raises
    ------
    ValueError
        If requested backend is not available.

    Examples
    --------
    >>> with use_backend('python'):
    ...     tree = parse_matrix(matrix, labels)

    Notes
    -----
    - **Not thread-safe**: Uses module-level state.  Pass ``backend=``
      to ``parse_matrix`` directly for thread-safe selection.
    - Raises ValueError immediately if backend unavailable
    """
    global _backend_override

    from ._backend import get_available_backends

    available = get_available_backends()

    if backend != "best" and backend not in available:
        raise ValueError(
            f"Backend '{backend}' not available. "
            f"Available backends: {', '.join(available)}"
        )

    original_override = _backend_override

    try:
        _backend_override = backend
        yield
    finally:
        _backend_override = original_override


def get_backend_override() -> Optional[str]:
    """
    Get the current backend override, if any.

    Returns
    -------
    str or None
        Current backend override, or None if no override active.
    """
    return _backend_override
