"""Test suite for tinyformfields.

This package contains tests for:
- Choice string parsing
- Schema decoding (valid schemas, malformed data, unknown tags)
- Per-type validation rules
- Error types and their messages
- End-to-end validation of full forms, first-error and collect-all modes
"""
