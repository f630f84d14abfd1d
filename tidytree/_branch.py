"""
_branch.py
==========
A rooted, ordered, n-ary phylogenetic tree built from linked ``Branch``
objects, with weighted edges and patristic-distance queries.

Public API
----------
  Branch(id="", length=0.0, children=None, weight=1.0, data=None)
      A single node.  Every branch is also the root of its own subtree.

  parse_json(json, id_label="id", length_label="length",
             children_label="children")
      Build a tree from a nested mapping (or its JSON text).

  get_children(branch)
      Child accessor for generic hierarchical layout code.

Model notes
-----------
* ``parent`` is a plain back-reference; ``children`` owns the subtree.
  ``is_consistent()`` checks that the two agree everywhere below a branch.
* ``depth``, ``height`` and ``value`` are derived fields.  They go stale after
  any structural mutation (excise, invert, isolate, ...) and are
  re-synchronised by ``fix_distances()``.  ``reroot``, ``simplify``,
  ``consolidate``, ``copy`` and the parsers call it for you.
* ``value`` is always ``weight + sum(child.value)``; it is never accumulated
  from its own previous value, so ``fix_distances()`` is idempotent.
  ``sum(valuator)`` rewrites ``weight`` and is the way to change what
  ``value`` measures (leaf count, cumulative length, ...).
* All traversals are iterative, so very deep (caterpillar) trees do not hit
  the interpreter's recursion limit.
"""

import json as _json
import uuid
from collections import deque
from functools import cmp_to_key
from operator import attrgetter
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

import numpy as np

from tidytree._exceptions import StructuralError
from tidytree._utils import format_length

# Branches shorter than this are merged into their parent by consolidate().
CONSOLIDATE_THRESHOLD = 0.0005


def _join_ids(*ids: str) -> str:
    """Join non-empty ids with '+'."""
    return "+".join(i for i in ids if i)


class Branch:
    """
    A node in a rooted phylogenetic tree.

    Attributes
    ----------
    id           : str             Label; '' for most internal nodes.
    length       : float           Edge length to the parent (0.0 if unset).
    parent       : Branch | None   Parent back-reference; None for the root.
    children     : list[Branch]    Ordered child branches.
    depth        : int             Edge count from the root.
    height       : int             Maximum tree depth minus ``depth``.
    weight       : float           This branch's own contribution to ``value``.
    value        : float           ``weight`` plus the children's ``value``.
    representing : int             1 + number of branches excised into this one.
    data         : dict            Mapping this branch was built from, if any.
    guid         : str             Process-unique identity key.
    """

    def __init__(
        self,
        id: str = "",
        length: float = 0.0,
        children: Optional[List["Branch"]] = None,
        weight: float = 1.0,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.guid: str = uuid.uuid4().hex
        self.id: str = id or ""
        self.length: float = float(length or 0.0)
        self.parent: Optional[Branch] = None
        self.children: List[Branch] = []
        self.depth: int = 0
        self.height: int = 0
        self.weight: float = weight
        self.value: float = weight
        self.representing: int = 1
        self.data: Dict[str, Any] = data if data is not None else {}
        for child in children or ():
            self.add_child(child)

    def __repr__(self) -> str:
        return (
            f"Branch(id={self.id!r}, length={self.length!r}, "
            f"children={len(self.children)})"
        )

    def __iter__(self) -> Iterator["Branch"]:
        """Iterate over this branch and its descendants in pre-order."""
        stack = [self]
        while stack:
            branch = stack.pop()
            yield branch
            stack.extend(reversed(branch.children))

    def __len__(self) -> int:
        """Number of branches in this subtree, including this one."""
        return sum(1 for _ in self)

    # ================================================================== #
    # Linking                                                              #
    # ================================================================== #

    def add_child(self, data: Union["Branch", Mapping[str, Any], None] = None) -> "Branch":
        """
        Attach a child as the last element of ``children``.

        Parameters
        ----------
        data : Branch | Mapping | None
            An existing Branch (re-parented to this one), a mapping with
            optional ``id``/``length`` keys, or None for a bare branch.

        Returns
        -------
        Branch   The child.
        """
        if isinstance(data, Branch):
            child = data
        elif data is None:
            child = Branch()
        else:
            child = Branch(
                id=data.get("id", ""), length=data.get("length", 0.0), data=dict(data)
            )
        child.parent = self
        self.children.append(child)
        return child

    def add_parent(
        self,
        data: Union["Branch", Mapping[str, Any], None] = None,
        siblings: Optional[List["Branch"]] = None,
    ) -> "Branch":
        """
        Insert a new parent above this branch, optionally adopting *siblings*.

        If this branch already has a parent, the new parent takes its slot
        there.  Returns the branch on which it was called.
        """
        if isinstance(data, Branch):
            new_parent = data
        elif data is None:
            new_parent = Branch()
        else:
            new_parent = Branch(
                id=data.get("id", ""), length=data.get("length", 0.0), data=dict(data)
            )
        old_parent = self.parent
        if old_parent is not None:
            index = old_parent.children.index(self)
            old_parent.children[index] = new_parent
        new_parent.parent = old_parent
        siblings = list(siblings or [])
        for sibling in siblings:
            sibling.set_parent(new_parent)
        new_parent.children = [self] + siblings
        self.parent = new_parent
        return self

    def set_parent(self, parent: Optional["Branch"]) -> "Branch":
        if parent is not None and not isinstance(parent, Branch):
            raise TypeError("Cannot set parent to a non-Branch object.")
        self.parent = parent
        return self

    def set_length(self, length: float) -> "Branch":
        self.length = float(length)
        return self

    def fix_parenthood(self, nonrecursive: bool = False) -> "Branch":
        """
        Make every child's ``parent`` point back at the branch that lists it.

        Parameters
        ----------
        nonrecursive : bool
            Only repair the direct children of this branch.
        """
        stack = [self]
        while stack:
            branch = stack.pop()
            for child in branch.children:
                child.parent = branch
                if not nonrecursive:
                    stack.append(child)
        return self

    # ================================================================== #
    # Traversal                                                            #
    # ================================================================== #

    def each(self, callback: Callable[["Branch"], Any]) -> "Branch":
        """Visit this branch and its descendants breadth-first."""
        for branch in self._breadth_first():
            callback(branch)
        return self

    def _breadth_first(self) -> Iterator["Branch"]:
        queue = deque([self])
        while queue:
            branch = queue.popleft()
            yield branch
            queue.extend(branch.children)

    def each_before(self, callback: Callable[["Branch"], Any]) -> "Branch":
        """
        Visit this branch and its descendants in pre-order.

        Children are read after the callback returns, so a callback may
        reorder the children of the branch it is given.
        """
        stack = [self]
        while stack:
            branch = stack.pop()
            callback(branch)
            stack.extend(reversed(branch.children))
        return self

    def each_after(self, callback: Callable[["Branch"], Any]) -> "Branch":
        """
        Visit this branch and its descendants in post-order.

        The visiting order is fixed before the first callback runs, so
        callbacks may excise or re-parent branches without any branch being
        skipped or visited twice.
        """
        for branch in self._post_order():
            callback(branch)
        return self

    def each_child(self, callback: Callable[["Branch"], Any]) -> "Branch":
        for child in list(self.children):
            callback(child)
        return self

    def _post_order(self) -> List["Branch"]:
        order = []
        stack = [self]
        while stack:
            branch = stack.pop()
            order.append(branch)
            stack.extend(branch.children)
        order.reverse()
        return order

    # ================================================================== #
    # Structural queries                                                   #
    # ================================================================== #

    def is_root(self) -> bool:
        return self.parent is None

    def is_leaf(self) -> bool:
        return len(self.children) == 0

    def is_child_of(self, parent: Union["Branch", str]) -> bool:
        if isinstance(parent, Branch):
            return self.parent is parent
        if isinstance(parent, str):
            return self.parent is not None and self.parent.id == parent
        raise TypeError(f"Unknown parent type passed to is_child_of: {type(parent)!r}")

    def is_descendant_of(self, ancestor: Union["Branch", str]) -> bool:
        """True if *ancestor* (a Branch or an id) lies above this branch."""
        if ancestor is None or ancestor == "":
            return False
        current = self.parent
        while current is not None:
            if current is ancestor or current.id == ancestor:
                return True
            current = current.parent
        return False

    def is_consistent(self) -> bool:
        """
        True if this branch and every descendant hold matching parent and
        child links.
        """
        if self.parent is not None and not any(
            c is self for c in self.parent.children
        ):
            return False
        for branch in self:
            for child in branch.children:
                if child.parent is not branch:
                    return False
        return True

    def has_child(self, child: Union["Branch", str]) -> bool:
        if isinstance(child, Branch):
            return any(c is child for c in self.children)
        if isinstance(child, str):
            return any(c.id == child for c in self.children)
        raise TypeError(f"Unknown type of child passed to has_child: {type(child)!r}")

    def has_descendant(self, descendant: Union["Branch", str]) -> bool:
        """True if *descendant* (a Branch or an id) lies strictly below this branch."""
        if isinstance(descendant, Branch):
            return descendant.is_descendant_of(self)
        if isinstance(descendant, str):
            return any(d.id == descendant for d in self.get_descendants())
        raise TypeError(
            f"Unknown type of descendant passed to has_descendant: {type(descendant)!r}"
        )

    def has_leaf(self, leaf: Union["Branch", str]) -> bool:
        leaves = self.get_leaves()
        if isinstance(leaf, Branch):
            return any(d is leaf for d in leaves)
        if isinstance(leaf, str):
            return any(d.id == leaf for d in leaves)
        raise TypeError(f"Unknown type of leaf passed to has_leaf: {type(leaf)!r}")

    def get_child(self, child_id: str) -> Optional["Branch"]:
        if not isinstance(child_id, str):
            raise TypeError("child_id is not a string.")
        for child in self.children:
            if child.id == child_id:
                return child
        return None

    def get_descendant(self, id: str) -> Optional["Branch"]:
        """First branch in pre-order (starting with this one) with *id*, or None."""
        for branch in self:
            if branch.id == id:
                return branch
        return None

    def get_descendants(self, include_self: bool = False) -> List["Branch"]:
        descendants = list(self)
        return descendants if include_self else descendants[1:]

    def descendants(self) -> List["Branch"]:
        return self.get_descendants(True)

    def get_ancestors(self, include_self: bool = False) -> List["Branch"]:
        ancestors = [self] if include_self else []
        current = self.parent
        while current is not None:
            ancestors.append(current)
            current = current.parent
        return ancestors

    def ancestors(self) -> List["Branch"]:
        return self.get_ancestors(True)

    def get_leaves(self) -> List["Branch"]:
        """Leaves below (or at) this branch, in left-to-right order."""
        return [branch for branch in self if not branch.children]

    leaves = get_leaves

    def get_root(self) -> "Branch":
        branch = self
        while branch.parent is not None:
            branch = branch.parent
        return branch

    def links(self) -> List[Dict[str, "Branch"]]:
        """Parent/child pairs below this branch, breadth-first."""
        links = []
        for branch in self._breadth_first():
            if branch.parent is not None and branch is not self:
                links.append({"source": branch.parent, "target": branch})
        return links

    def path(self, target: "Branch") -> List["Branch"]:
        """Branches on the path from this branch to *target*, both included."""
        mrca = self.get_mrca(target)
        upward = [self]
        current = self
        while current is not mrca:
            current = current.parent
            upward.append(current)
        downward = []
        current = target
        while current is not mrca:
            downward.append(current)
            current = current.parent
        return upward + downward[::-1]

    # ================================================================== #
    # Distances                                                            #
    # ================================================================== #

    def _resolve(self, branch: Union["Branch", str], role: str) -> "Branch":
        if isinstance(branch, Branch):
            return branch
        found = self.get_root().get_descendant(branch)
        if found is None:
            raise StructuralError(
                f"No {role} with id {branch!r} found in tree.",
                suggestion="Check the id against tree.get_leaves().",
            )
        return found

    def depth_of(self, descendant: Union["Branch", str]) -> float:
        """
        Sum of branch lengths from this branch down to *descendant*.

        Raises
        ------
        StructuralError   if *descendant* is not this branch or below it.
        """
        if isinstance(descendant, str):
            found = self.get_descendant(descendant)
            if found is None:
                raise StructuralError(f"No descendant with id {descendant!r}.")
            descendant = found
        distance = 0.0
        current = descendant
        while current is not self:
            if current is None:
                raise StructuralError(
                    "Cannot compute depth: branch is not a descendant."
                )
            distance += current.length
            current = current.parent
        return distance

    def get_mrca(self, cousin: Union["Branch", str]) -> "Branch":
        """
        Most recent common ancestor of this branch and *cousin*.

        A branch is its own ancestor here, so the MRCA of a branch and one of
        its ancestors is that ancestor.

        Raises
        ------
        StructuralError   if the two branches are not in the same tree.
        """
        cousin = self._resolve(cousin, "cousin")
        lineage = {id(b) for b in self.get_ancestors(True)}
        current = cousin
        while current is not None:
            if id(current) in lineage:
                return current
            current = current.parent
        raise StructuralError(
            "Branch and cousin do not share a common ancestor.",
            suggestion="Both branches must belong to the same tree.",
        )

    def distance_to(self, cousin: Union["Branch", str]) -> float:
        """Patristic distance between this branch and *cousin*."""
        cousin = self._resolve(cousin, "cousin")
        mrca = self.get_mrca(cousin)
        return mrca.depth_of(self) + mrca.depth_of(cousin)

    def distance_between(
        self, descendant_a: Union["Branch", str], descendant_b: Union["Branch", str]
    ) -> float:
        """Patristic distance between two branches of this tree."""
        return self._resolve(descendant_a, "branch").distance_to(
            self._resolve(descendant_b, "branch")
        )

    def sources(self, cousin: "Branch") -> bool:
        """True if this branch sits closer to its MRCA with *cousin* than *cousin* does."""
        mrca = self.get_mrca(cousin)
        return mrca.depth_of(self) < mrca.depth_of(cousin)

    def targets(self, cousin: "Branch") -> bool:
        return cousin.sources(self)

    def to_matrix(self) -> Dict[str, Any]:
        """
        All-pairs patristic distances between the leaves below this branch.

        Returns
        -------
        dict
            ``{"matrix": float64 ndarray (n, n), "ids": list[str]}`` with rows
            and columns in ``get_leaves()`` order.
        """
        leaves = self.get_leaves()
        n = len(leaves)
        # Distance from this branch to every node below it; the pairwise
        # distance is then rd[u] + rd[v] - 2 * rd[mrca(u, v)].
        root_distance = {id(self): 0.0}
        for branch in self:
            if branch is not self:
                root_distance[id(branch)] = (
                    root_distance[id(branch.parent)] + branch.length
                )
        matrix = np.zeros((n, n), dtype=np.float64)
        for i in range(n):
            for j in range(i):
                mrca = leaves[i].get_mrca(leaves[j])
                distance = (
                    root_distance[id(leaves[i])]
                    + root_distance[id(leaves[j])]
                    - 2.0 * root_distance[id(mrca)]
                )
                matrix[i, j] = distance
                matrix[j, i] = distance
        return {"matrix": matrix, "ids": [leaf.id for leaf in leaves]}

    # ================================================================== #
    # Mutation                                                             #
    # ================================================================== #

    def excise(self) -> "Branch":
        """
        Remove this branch, handing its children to its parent.

        Each child absorbs this branch's length so root-to-leaf path lengths
        are preserved.  The children take this branch's slot in the parent's
        child list, keeping leaf order.  A root with a single child is
        replaced by that child.

        Returns
        -------
        Branch   The former parent (or the promoted child for a root).

        Raises
        ------
        StructuralError   on a root with no children or several children.
        """
        parent = self.parent
        if parent is None:
            if len(self.children) != 1:
                raise StructuralError(
                    f"Cannot excise a root branch with {len(self.children)} children."
                )
            child = self.children[0]
            child.length += self.length
            child.parent = None
            child.representing += 1
            self.children = []
            return child
        for child in self.children:
            child.length += self.length
            child.parent = parent
        index = parent.children.index(self)
        parent.children[index : index + 1] = self.children
        self.children = []
        self.parent = None
        parent.representing += 1
        return parent

    def isolate(self) -> "Branch":
        """Detach this branch and its subtree, making it a root.  Returns self."""
        if self.parent is None:
            raise StructuralError("Cannot isolate the root branch.")
        self.parent.children.remove(self)
        self.parent = None
        return self

    def remove(self, prune_ancestors: bool = False) -> "Branch":
        """
        Detach this branch and its subtree from the tree.

        Parameters
        ----------
        prune_ancestors : bool
            Also remove each ancestor left without children.

        Returns
        -------
        Branch   The root of the remaining tree.
        """
        root = self.get_root()
        parent = self.parent
        self.isolate()
        if prune_ancestors and parent is not None:
            parent.remove_if_no_children()
        return root

    def remove_if_no_children(self, nonrecursive: bool = False) -> "Branch":
        """
        Remove this branch if it is childless, then do the same for its
        ancestors unless *nonrecursive*.  The root is never removed.

        Returns
        -------
        Branch   The root of the tree.
        """
        root = self.get_root()
        branch = self
        while branch.parent is not None and not branch.children:
            parent = branch.parent
            branch.isolate()
            if nonrecursive:
                break
            branch = parent
        return root

    def replace(self, replacement: "Branch") -> "Branch":
        """
        Put *replacement* in this branch's position and detach this branch.

        Returns
        -------
        Branch   The root of the modified tree.
        """
        parent = self.parent
        if parent is None:
            raise StructuralError("Cannot replace the root branch.")
        if replacement.parent is not None:
            replacement.isolate()
        index = parent.children.index(self)
        parent.children[index] = replacement
        replacement.parent = parent
        self.parent = None
        return parent.get_root()

    def invert(self) -> "Branch":
        """
        Swap this branch with its parent.

        The two lengths are exchanged, the old parent becomes the last child
        of this branch, and this branch takes the old parent's place under
        the grandparent (if any).  Used by ``reroot``.

        Raises
        ------
        StructuralError   on the root.
        """
        old_parent = self.parent
        if old_parent is None:
            raise StructuralError("Cannot invert the root branch.")
        grandparent = old_parent.parent
        self.length, old_parent.length = old_parent.length, self.length
        old_parent.children.remove(self)
        if grandparent is not None:
            index = grandparent.children.index(old_parent)
            grandparent.children[index] = self
        self.parent = grandparent
        self.children.append(old_parent)
        old_parent.parent = self
        return self

    def reroot(self) -> "Branch":
        """
        Make this branch the root of its tree.

        The chain of ancestors is inverted top-down, so pairwise patristic
        distances are unchanged.  The returned branch (this one) supersedes
        any reference held to the old root.
        """
        chain = []
        current = self
        while current.parent is not None:
            chain.append(current)
            current = current.parent
        for branch in reversed(chain):
            branch.invert()
        return self.fix_distances()

    def rotate(self) -> "Branch":
        """Reverse the order of this branch's children."""
        self.children.reverse()
        return self

    def flip(self) -> "Branch":
        """Reverse the child order of every branch in this subtree."""
        return self.each(lambda d: d.rotate())

    def sort(
        self,
        comparator: Optional[Callable[["Branch", "Branch"], float]] = None,
        key: Optional[Callable[["Branch"], Any]] = None,
        reverse: bool = False,
    ) -> "Branch":
        """
        Sort children in place, top-down, for every branch in this subtree.

        Parameters
        ----------
        comparator : callable, optional
            Two-argument comparison returning negative/zero/positive.
        key : callable, optional
            One-argument sort key; ignored if *comparator* is given.
        reverse : bool
            Sort descending.

        With neither argument, children are ordered by ascending ``value``.
        """
        if comparator is not None:
            key = cmp_to_key(comparator)
        elif key is None:
            key = attrgetter("value")
        return self.each_before(lambda d: d.children.sort(key=key, reverse=reverse))

    def simplify(self) -> "Branch":
        """
        Collapse every branch with exactly one child into that child.

        Ids of the collapsed pair are joined with '+'.  If this branch is a
        root with a single child it is replaced too, so use the return value
        as the surviving top branch.
        """
        survivor = self
        for branch in self._post_order():
            if len(branch.children) != 1:
                continue
            child = branch.children[0]
            child.id = _join_ids(branch.id, child.id)
            branch.excise()
            if branch is survivor:
                survivor = child
        return survivor.fix_distances()

    def consolidate(self) -> "Branch":
        """
        Excise every non-root branch shorter than ``CONSOLIDATE_THRESHOLD``,
        merging its id into the parent's.

        When called on a short non-root branch, that branch is merged too and
        its former parent is returned.
        """
        survivor = self
        for branch in self._post_order():
            if branch.parent is None or branch.length >= CONSOLIDATE_THRESHOLD:
                continue
            branch.parent.id = _join_ids(branch.parent.id, branch.id)
            parent = branch.excise()
            if branch is survivor:
                survivor = parent
        return survivor.fix_distances()

    # ================================================================== #
    # Derived values                                                       #
    # ================================================================== #

    def fix_distances(self) -> "Branch":
        """
        Recompute ``depth``, ``height`` and ``value`` for the whole tree.

        Pass 1 (pre-order from the root) sets ``depth`` and finds the maximum
        depth; pass 2 (post-order) sets ``height = max_depth - depth`` and
        ``value = weight + sum(child.value)``.
        """
        root = self.get_root()
        max_depth = 0
        root.depth = 0
        for branch in root:
            if branch.parent is not None:
                branch.depth = branch.parent.depth + 1
                if branch.depth > max_depth:
                    max_depth = branch.depth
        for branch in root._post_order():
            branch.height = max_depth - branch.depth
            branch.value = branch.weight + sum(c.value for c in branch.children)
        return self

    def sum(self, valuator: Optional[Callable[["Branch"], float]] = None) -> "Branch":
        """
        Set each branch's ``weight`` to ``valuator(branch)`` and recompute
        ``value`` bottom-up.  Without a valuator the current weights are kept.
        """
        for branch in self._post_order():
            if valuator is not None:
                branch.weight = valuator(branch)
            branch.value = branch.weight + sum(c.value for c in branch.children)
        return self

    def count(self) -> "Branch":
        """Set each ``value`` to the number of branches in its subtree."""
        return self.sum(lambda d: 1)

    def normalize(self, newmin: float = 0.0, newmax: float = 1.0) -> "Branch":
        """
        Linearly rescale ``value`` over this subtree onto [newmin, newmax].

        If every value is equal, all are set to *newmin*.  Weights are left
        alone, so the next ``fix_distances()`` restores the raw values.
        """
        branches = list(self)
        low = min(d.value for d in branches)
        high = max(d.value for d in branches)
        ratio = (newmax - newmin) / (high - low) if high != low else 0.0
        for branch in branches:
            branch.value = (branch.value - low) * ratio + newmin
        return self

    # ================================================================== #
    # Serialisation                                                        #
    # ================================================================== #

    def to_newick(self) -> str:
        """
        Newick text for this subtree, terminated by ';'.

        Lengths are written only when non-zero and never in scientific
        notation.
        """
        return self._newick_body() + ";"

    def _newick_body(self) -> str:
        rendered: Dict[int, str] = {}
        for branch in self._post_order():
            out = ""
            if branch.children:
                out = "(" + ",".join(rendered.pop(id(c)) for c in branch.children) + ")"
            out += branch.id
            if branch.length:
                out += ":" + format_length(branch.length)
            rendered[id(branch)] = out
        return rendered[id(self)]

    def to_object(self) -> Dict[str, Any]:
        """
        Plain nested dict ``{"id", "length", "children"?}`` without parent
        references, suitable for ``json.dumps``.
        """
        built: Dict[int, Dict[str, Any]] = {}
        for branch in self._post_order():
            output: Dict[str, Any] = {"id": branch.id, "length": branch.length}
            if branch.children:
                output["children"] = [built.pop(id(c)) for c in branch.children]
            built[id(branch)] = output
        return built[id(self)]

    to_json = to_object

    def to_string(self, indent: Optional[int] = None) -> str:
        """JSON text of ``to_object()``."""
        return _json.dumps(self.to_object(), indent=indent)

    def copy(self) -> "Branch":
        """Deep copy of this subtree as a new, distance-fixed root."""
        return parse_json(self.to_object())

    clone = copy


def parse_json(
    json: Union[str, Mapping[str, Any]],
    id_label: str = "id",
    length_label: str = "length",
    children_label: str = "children",
) -> Branch:
    """
    Build a tree from hierarchical data.

    Parameters
    ----------
    json : str | Mapping
        JSON text, or the already-decoded nested mapping.
    id_label, length_label, children_label : str
        Keys holding each node's id, length and child list.

    Returns
    -------
    Branch   The distance-fixed root.
    """
    if isinstance(json, str):
        json = _json.loads(json)

    def build(node: Mapping[str, Any]) -> Branch:
        label = node.get(id_label)
        return Branch(
            id="" if label is None else str(label),
            length=node.get(length_label) or 0.0,
        )

    root = build(json)
    stack = [(root, json)]
    while stack:
        branch, node = stack.pop()
        children = node.get(children_label)
        if isinstance(children, list):
            for child_node in children:
                child = branch.add_child(build(child_node))
                stack.append((child, child_node))
    return root.fix_distances()


def get_children(branch: Branch) -> List[Branch]:
    """Child accessor for hierarchical layout code."""
    return branch.children
