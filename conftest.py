"""
conftest.py
===========
Session-level pytest configuration for the test suite.

Custom marks
------------
numba
    Applied to tests that compare the numba-compiled search kernel with the
    pure-Python one.  They skip themselves when numba is not installed;
    deselect them entirely with ``-m "not numba"``.

    Registration here suppresses PytestUnknownMarkWarning and makes the mark
    visible in ``pytest --markers``.

Warning filters
---------------
NumbaPerformanceWarning messages are filtered out during tests.  The search
kernel is compiled on tiny matrices where they carry no information.
"""

import warnings


def pytest_configure(config):
    """
    Configure pytest before test collection begins.

    This runs before any test module is imported, so the warning filter is
    in place before the kernel is compiled.
    """
    config.addinivalue_line(
        "markers",
        "numba: compares the numba search kernel against the Python one "
        "(skipped without numba)",
    )

    try:
        from numba.core.errors import NumbaPerformanceWarning

        warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)
    except ImportError:
        # Numba not available, no warnings to suppress
        pass


def pytest_unconfigure(config):
    """Restore default warning behavior."""
    warnings.resetwarnings()
