"""
_utils.py
=========
General-purpose utility functions for tidytree.

These are standalone functions that don't depend on the Branch class and
could be useful in multiple contexts.
"""

from typing import Any, Callable, NamedTuple, Optional

import numpy as np

from tidytree._exceptions import TreeError


def format_length(length: float) -> str:
    """
    Format a branch length without scientific notation.

    Python's ``repr`` switches to exponent form for magnitudes below 1e-4
    or above 1e16, which many Newick consumers cannot read.  This uses
    ``numpy.format_float_positional`` to always emit positional digits,
    with the shortest representation that round-trips.

    Parameters
    ----------
    length : float
        Branch length to format.

    Returns
    -------
    str
        Positional decimal string; integral values carry no trailing point.

    Examples
    --------
    >>> format_length(0.1)
    '0.1'

    >>> format_length(1e-7)
    '0.0000001'

    >>> format_length(2.0)
    '2'

    >>> format_length(1.5e22)
    '15000000000000000000000'
    """
    return np.format_float_positional(float(length), trim="-")


def format_newick(newick: str) -> str:
    """
    Format a NEWICK string for consistent representation.

    Ensures the NEWICK string:
    - Ends with a semicolon
    - Has no leading/trailing whitespace

    Parameters
    ----------
    newick : str
        NEWICK string to format.

    Returns
    -------
    str
        Formatted NEWICK string.

    Examples
    --------
    >>> format_newick('((A:1,B:1):1,(C:1,D:1):1)')
    '((A:1,B:1):1,(C:1,D:1):1);'

    >>> format_newick('  ((A:1,B:1):1);  ')
    '((A:1,B:1):1);'
    """
    newick = newick.strip()
    if not newick.endswith(";"):
        newick += ";"
    return newick


class Outcome(NamedTuple):
    """Result of :func:`attempt`: either ``value`` or the ``error`` raised."""

    ok: bool
    value: Any = None
    error: Optional[TreeError] = None


def attempt(operation: Callable[..., Any], *args, **kwargs) -> Outcome:
    """
    Run *operation* and capture a tree error instead of propagating it.

    Intended for batch workflows (e.g. rerooting every leaf of a tree in
    turn) where one invalid request should be reported, not abort the batch.
    Only :class:`TreeError` subclasses are captured; anything else is a bug
    and propagates.

    Examples
    --------
    >>> tree = parse_newick("(A,B);")
    >>> attempt(tree.invert)
    Outcome(ok=False, value=None, error=StructuralError('Cannot invert the root branch.'))

    >>> attempt(tree.children[0].reroot).ok
    True
    """
    try:
        return Outcome(True, operation(*args, **kwargs), None)
    except TreeError as err:
        return Outcome(False, None, err)
