"""
_backend.py
===========
Backend detection and selection for the neighbor-joining search kernel.

This module detects available execution backends (pure Python, numba JIT)
and provides functions to query and select the best backend.

Functions in this module have NO side effects - they only query system state.
Logging is done by the calling code, not here.
"""

from functools import lru_cache
from typing import Callable, List, Optional, Tuple


# ============================================================================ #
# Backend Detection (No Side Effects)
# ============================================================================ #


def check_numba_available() -> bool:
    """
    Check if numba is available for JIT compilation.

    Returns
    -------
    bool
        True if numba can be imported, False otherwise.
    """
    try:
        import numba  # noqa: F401

        return True
    except ImportError:
        return False


def get_available_backends() -> List[str]:
    """
    Get list of available execution backends.

    Returns
    -------
    list[str]
        List of available backends in preference order.
        Always includes 'python'.
        May include 'numba' if numba is available.

    Examples
    --------
    >>> get_available_backends()
    ['python']  # No numba installed

    >>> get_available_backends()
    ['python', 'numba']  # Numba installed
    """
    backends = ["python"]  # Always available
    if check_numba_available():
        backends.append("numba")
    return backends


def get_best_backend() -> str:
    """
    Get the most optimized available backend.

    Returns
    -------
    str
        'numba' if available, otherwise 'python'.
    """
    backends = get_available_backends()
    # List is in preference order, last is best
    return backends[-1]


def resolve_backend(backend: str) -> str:
    """
    Resolve a backend specification to an actual backend.

    Parameters
    ----------
    backend : str
        Backend specification:
        - 'best': Use the best available backend
        - 'python', 'numba': Use specific backend

    Returns
    -------
    str
        Resolved backend name.

    Raises
    ------
    ValueError
        If requested backend is not available.
    """
    if backend == "best":
        return get_best_backend()

    available = get_available_backends()
    if backend not in available:
        raise ValueError(
            f"Backend '{backend}' not available. "
            f"Available backends: {', '.join(available)}"
        )

    return backend


# ============================================================================ #
# Kernel Import Helpers
# ============================================================================ #


@lru_cache(maxsize=None)
def import_cpu_kernels() -> Tuple[bool, Optional[Callable]]:
    """
    Try to compile the neighbor-joining search kernel with numba.

    The result is cached so compilation happens at most once per process.

    Returns
    -------
    tuple
        (success, search_kernel)
        - success: Whether numba could be imported
        - search_kernel: ``numba.njit(search_core)`` or None
    """
    try:
        import numba
    except ImportError:
        return (False, None)

    from tidytree._nj_kernels import search_core

    return (True, numba.njit(cache=True)(search_core))


def get_search_kernel(backend: str) -> Callable:
    """
    Return the search kernel for an already-resolved *backend*.

    Parameters
    ----------
    backend : str
        'python' or 'numba'.
    """
    if backend == "numba":
        ok, kernel = import_cpu_kernels()
        if ok:
            return kernel
        raise ValueError("Backend 'numba' requested but numba is not installed.")

    from tidytree._nj_kernels import search_core

    return search_core


# ============================================================================ #
# Module-Level State Query (Read-Only)
# ============================================================================ #


def get_backend_info() -> dict:
    """
    Get comprehensive backend information.

    Returns
    -------
    dict
        Dictionary with keys:
        - 'numba_available': bool
        - 'backends': list[str]
        - 'best_backend': str

    Examples
    --------
    >>> info = get_backend_info()
    >>> info['backends']
    ['python', 'numba']
    """
    return {
        "numba_available": check_numba_available(),
        "backends": get_available_backends(),
        "best_backend": get_best_backend(),
    }
