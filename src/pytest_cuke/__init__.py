"""Pytest plugin and glue loader for behaviour-driven specifications.

The `pytest_cuke` package loads step definitions and hooks written as
plain Python glue files and exposes them to pytest.

Key features:
- recursive discovery of glue files under a root directory;
- a keyword DSL (`Given`, `When`, `Then`, `And`, `But`, `Before`, `After`)
  available in glue files without imports, for the duration of a load only;
- exact source location of every declaration;
- a pytest fixture and a command-line utility to inspect loaded glue.
"""
