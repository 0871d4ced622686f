"""
Test package for kousei.

This package contains:
- Unit tests for the core and the built-in rules
- Integration tests for the runner, CLI and HTTP API
- Property-based tests using Hypothesis
"""
