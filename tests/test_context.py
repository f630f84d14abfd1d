"""
test_context.py
===============
Tests for the context managers in _context.py and the helpers in _utils.py.
"""

import logging
import sys
import warnings
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from tidytree import (
    Outcome,
    StructuralError,
    attempt,
    format_length,
    format_newick,
    get_available_backends,
    parse_matrix,
    parse_newick,
    quiet,
    suppress_logger,
    suppress_warnings,
    use_backend,
)
from tidytree._context import get_backend_override


NEGATIVE = [[0, 1, 10], [1, 0, 1], [10, 1, 0]]


# ======================================================================== #
# Logging control                                                           #
# ======================================================================== #


class TestLoggingContext:
    def test_suppress_logger_restores_level(self):
        logger = logging.getLogger("tidytree._neighbor_joining")
        original = logger.level
        with suppress_logger("tidytree._neighbor_joining"):
            assert logger.level == logging.CRITICAL
        assert logger.level == original

    def test_suppress_logger_restores_on_error(self):
        logger = logging.getLogger("tidytree._newick")
        original = logger.level
        with pytest.raises(RuntimeError):
            with suppress_logger("tidytree._newick", logging.ERROR):
                raise RuntimeError("boom")
        assert logger.level == original

    def test_quiet_silences_warnings(self, caplog):
        with caplog.at_level(logging.DEBUG):
            with quiet():
                parse_matrix(NEGATIVE, ["A", "B", "C"])
        assert not [r for r in caplog.records if r.name.startswith("tidytree")]

    def test_quiet_level(self, caplog):
        with caplog.at_level(logging.DEBUG):
            with quiet(logging.WARNING):
                parse_matrix(NEGATIVE, ["A", "B", "C"])
        levels = {r.levelno for r in caplog.records if r.name.startswith("tidytree")}
        assert levels == {logging.WARNING}

    def test_quiet_restores(self):
        logger = logging.getLogger("tidytree")
        original = logger.level
        with quiet():
            pass
        assert logger.level == original


# ======================================================================== #
# Warning control                                                           #
# ======================================================================== #


class TestSuppressWarnings:
    def test_category(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            with suppress_warnings(DeprecationWarning):
                warnings.warn("old", DeprecationWarning)
                warnings.warn("other", UserWarning)
        assert [str(w.message) for w in caught] == ["other"]

    def test_all(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            with suppress_warnings():
                warnings.warn("anything", UserWarning)
        assert caught == []

    def test_message(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            with suppress_warnings(UserWarning, message="compil"):
                warnings.warn("compiling search kernel", UserWarning)
                warnings.warn("unrelated", UserWarning)
        assert [str(w.message) for w in caught] == ["unrelated"]


# ======================================================================== #
# Backend override                                                          #
# ======================================================================== #


class TestUseBackend:
    def test_sets_and_restores(self):
        assert get_backend_override() is None
        with use_backend("python"):
            assert get_backend_override() == "python"
            with use_backend("best"):
                assert get_backend_override() == "best"
            assert get_backend_override() == "python"
        assert get_backend_override() is None

    def test_unavailable_backend(self):
        with pytest.raises(ValueError) as excinfo:
            with use_backend("cuda"):
                pass
        assert "Available backends" in str(excinfo.value)
        assert get_backend_override() is None

    def test_override_wins(self, caplog):
        backend = get_available_backends()[0]
        with caplog.at_level(logging.INFO, logger="tidytree"):
            with use_backend(backend):
                parse_matrix([[0, 1], [1, 0]], backend="best")
        assert f"backend={backend!r}" in caplog.text


# ======================================================================== #
# Utilities                                                                 #
# ======================================================================== #


class TestFormatting:
    @pytest.mark.parametrize(
        "length, expected",
        [
            (0.1, "0.1"),
            (2.0, "2"),
            (-4.0, "-4"),
            (1e-7, "0.0000001"),
            (1.5e22, "15000000000000000000000"),
            (0.30000000000000004, "0.30000000000000004"),
        ],
    )
    def test_format_length(self, length, expected):
        assert format_length(length) == expected

    def test_format_length_round_trips(self):
        for value in (1e-5, 0.333, 123.456, 7e-12):
            assert float(format_length(value)) == value

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("((A:1,B:1):1,(C:1,D:1):1)", "((A:1,B:1):1,(C:1,D:1):1);"),
            ("  ((A:1,B:1):1);  ", "((A:1,B:1):1);"),
            ("(A,B);", "(A,B);"),
        ],
    )
    def test_format_newick(self, raw, expected):
        assert format_newick(raw) == expected


class TestAttempt:
    def test_success(self):
        tree = parse_newick("(A,B);")
        outcome = attempt(tree.get_descendant("A").reroot)
        assert outcome.ok
        assert outcome.value.id == "A"
        assert outcome.error is None

    def test_tree_error_captured(self):
        tree = parse_newick("(A,B);")
        outcome = attempt(tree.invert)
        assert outcome == Outcome(False, None, outcome.error)
        assert isinstance(outcome.error, StructuralError)

    def test_arguments_forwarded(self):
        outcome = attempt(parse_newick, "(A,B")
        assert not outcome.ok
        assert outcome.error.position is not None

    def test_other_errors_propagate(self):
        with pytest.raises(TypeError):
            attempt(parse_newick("(A,B);").has_child, 3)

    def test_batch_invert(self):
        tree = parse_newick("(A:1,(B:1,C:1)x:1);")
        outcomes = [attempt(b.invert) for b in [tree] + tree.get_descendants()[:1]]
        assert [o.ok for o in outcomes] == [False, True]
