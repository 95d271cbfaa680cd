"""Test suite for the pytest-cuke package.

This package contains unit and integration tests validating glue
discovery, keyword injection and restoration, call-site location,
and the pytest and command-line integrations.
"""
