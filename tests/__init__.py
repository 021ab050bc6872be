"""Test package marker for the jmapmail suites.

Keeps ``tests.conftest`` importable as a package module; ``tests/unit`` adds
itself to ``sys.path`` so its helpers (``fakes``) import without a prefix.
"""
