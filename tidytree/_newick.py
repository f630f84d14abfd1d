"""
_newick.py
==========
NEWICK text → Branch tree.

Public API
----------
  parse_newick(newick_string) -> Branch
      Parse a single tree.  The trailing ';' is optional.

  tokenize(newick_string) -> list[str]
      Split NEWICK text into structural markers and label/length tokens.

Grammar handled
---------------
    tree    := subtree ';'
    subtree := [ '(' subtree { ',' subtree } ')' ] [ label ] [ ':' length ]

Whitespace around the five structural markers ``( ) , : ;`` is ignored;
whitespace inside a label is kept.  Missing lengths default to 0.0.

Serialisation is the inverse operation and lives on the tree itself
(``Branch.to_newick``).
"""

import logging
import math
import re
from typing import List

from tidytree._branch import Branch
from tidytree._exceptions import NewickParseError
from tidytree._logging import log_parse_summary
from tidytree._utils import format_newick

logger = logging.getLogger(__name__)

_TOKEN_SPLIT = re.compile(r"\s*([;(),:])\s*")
_MARKERS = frozenset("();,:")


def tokenize(newick_string: str) -> List[str]:
    """
    Split *newick_string* on the structural markers, keeping the markers.

    Empty strings between adjacent markers are dropped.

    Examples
    --------
    >>> tokenize("(A:0.1, B)root;")
    ['(', 'A', ':', '0.1', ',', 'B', ')', 'root', ';']
    """
    return [t for t in _TOKEN_SPLIT.split(newick_string.strip()) if t != ""]


def parse_newick(newick_string: str) -> Branch:
    """
    Parse *newick_string* and return the root Branch of the tree.

    Single-pass scan over the token list with an explicit ancestor stack:

      '('   push the current branch, descend into a new first child
      ','   start a new sibling under the top-of-stack ancestor
      ')'   pop back to the ancestor (a label/length may follow)
      ':'   the next token is the current branch's length
      other a label (after '(' ')' ',' or at the start) or a length
            (after ':')

    Parameters
    ----------
    newick_string : str
        A NEWICK-formatted tree string (trailing ';' optional).

    Returns
    -------
    Branch
        The root, with ``fix_distances()`` already applied.

    Raises
    ------
    NewickParseError
        On empty input, unbalanced parentheses, a missing, repeated or
        non-numeric length, a '(' that does not open a new branch, or
        trailing content after ';'.
    """
    if not newick_string or not newick_string.strip():
        raise NewickParseError(
            "Cannot parse an empty Newick string.",
            suggestion="A minimal tree looks like '(A,B);'.",
        )
    tokens = tokenize(format_newick(newick_string))
    if tokens == [";"]:
        raise NewickParseError(
            "Cannot parse a Newick string with no branches.",
            0,
            suggestion="A minimal tree looks like '(A,B);'.",
        )

    ancestors: List[Branch] = []
    tree = Branch()
    previous = None
    has_length = False
    n_tokens = len(tokens)

    for t in range(n_tokens):
        token = tokens[t]

        if token == "(":
            if previous not in (None, "(", ","):
                raise NewickParseError(
                    "Unexpected '(' after a closed or labelled branch",
                    t,
                    suggestion="Separate sibling subtrees with ','.",
                )
            ancestors.append(tree)
            tree = tree.add_child()
            has_length = False
        elif token == ",":
            if not ancestors:
                raise NewickParseError(
                    "Sibling separator ',' outside of any parenthesis", t
                )
            tree = ancestors[-1].add_child()
            has_length = False
        elif token == ")":
            if not ancestors:
                raise NewickParseError(
                    "Unbalanced ')' without a matching '('",
                    t,
                    suggestion="Check that every '(' has a closing ')'.",
                )
            tree = ancestors.pop()
            has_length = False
        elif token == ":":
            if has_length:
                raise NewickParseError("Branch already has a length", t)
            has_length = True
            if t + 1 >= n_tokens or tokens[t + 1] in _MARKERS:
                raise NewickParseError("Expected a branch length after ':'", t)
        elif token == ";":
            if ancestors:
                raise NewickParseError(
                    f"Unbalanced parentheses: {len(ancestors)} '(' not closed",
                    t,
                    suggestion="Check that every '(' has a closing ')'.",
                )
            if t != n_tokens - 1:
                raise NewickParseError(
                    "Unexpected content after the terminating ';'",
                    t + 1,
                    suggestion="Parse one tree per call.",
                )
        elif previous == ":":
            try:
                length = float(token)
            except ValueError:
                raise NewickParseError(
                    f"Branch length {token!r} is not a number", t
                ) from None
            if not math.isfinite(length):
                raise NewickParseError(f"Branch length {token!r} is not finite", t)
            tree.length = length
        elif previous in (None, "(", ")", ","):
            tree.id = token
        else:
            raise NewickParseError(f"Unexpected token {token!r}", t)

        previous = token

    tree.fix_distances()
    log_parse_summary(len(tree), len(tree.get_leaves()), tree.height)
    return tree
