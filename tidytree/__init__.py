"""
tidytree
========

Phylogenetic tree model for interactive tree viewers: Newick parsing and
serialisation, in-place tree surgery (reroot, excise, simplify, ...),
patristic distances, and neighbor-joining inference from distance matrices.

Main Classes
------------
Branch : A node of a rooted tree; every Branch is the root of its subtree

Parsers
-------
parse_newick : Newick text → Branch
parse_json : nested mapping / JSON text → Branch
parse_matrix : distance matrix → Branch (neighbor joining)

Errors
------
TreeError : Base class
StructuralError : Invalid mutation or query on the tree
NewickParseError : Malformed Newick text
MatrixError : Malformed distance matrix (alias PreconditionError)

Context Managers
----------------
quiet : Suppress tidytree logging during operations
suppress_logger : Suppress specific logger
suppress_warnings : Suppress specific warnings
use_backend : Force a specific neighbor-joining backend

Utilities
---------
attempt : Run an operation, returning an Outcome instead of raising
format_length : Format a branch length without scientific notation
format_newick : Format NEWICK strings consistently
get_children : Child accessor for hierarchical layout code

Backend Information
-------------------
get_available_backends : Query available computational backends
get_backend_info : Get comprehensive backend status
check_numba_available : Check if numba is available

Examples
--------
Basic usage:

>>> from tidytree import parse_newick
>>> tree = parse_newick("(A:0.1,B:0.2,(C:0.3,D:0.4):0.5);")
>>> [leaf.id for leaf in tree.get_leaves()]
['A', 'B', 'C', 'D']
>>> tree.distance_between("A", "D")
1.0
>>> tree = tree.get_descendant("C").reroot()
>>> tree.to_newick()
'((D:0.4,(A:0.1,B:0.2):0.5):0.3)C;'

Neighbor joining:

>>> from tidytree import parse_matrix
>>> tree = parse_matrix([[0, 5, 9, 9], [5, 0, 10, 10],
...                      [9, 10, 0, 8], [9, 10, 8, 0]], ["A", "B", "C", "D"])
>>> tree.to_newick()
'(((A:2,B:3):3,C:4):2,D:2);'
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Main classes
from ._branch import Branch, CONSOLIDATE_THRESHOLD, parse_json, get_children
from ._newick import parse_newick
from ._neighbor_joining import parse_matrix

# Errors
from ._exceptions import (
    TreeError,
    StructuralError,
    NewickParseError,
    MatrixError,
    PreconditionError,
)

# Context managers (user-facing utilities)
from ._context import (
    suppress_logger,
    quiet,
    suppress_warnings,
    use_backend,
)

# Utilities (generally useful functions)
from ._utils import attempt, Outcome, format_length, format_newick

# Backend information (useful for checking capabilities)
from ._backend import (
    get_available_backends,
    get_backend_info,
    check_numba_available,
)

# Public API
__all__ = [
    # Main classes
    "Branch",
    "CONSOLIDATE_THRESHOLD",
    # Parsers
    "parse_newick",
    "parse_json",
    "parse_matrix",
    "get_children",
    # Errors
    "TreeError",
    "StructuralError",
    "NewickParseError",
    "MatrixError",
    "PreconditionError",
    # Context managers
    "suppress_logger",
    "quiet",
    "suppress_warnings",
    "use_backend",
    # Utilities
    "attempt",
    "Outcome",
    "format_length",
    "format_newick",
    # Backend information
    "get_available_backends",
    "get_backend_info",
    "check_numba_available",
    # Version info
    "__version__",
]
