"""Unit tests for individual components in isolation.

Ensures fast execution with no network access.

Coverage:
    - stream/: Frame decoding, classification, normalization, reduction
    - stream/session: Lifecycle, cancellation and session isolation
    - client/: Configuration loading and validation

Uses an in-memory transport where interleavings matter. Leverages
pytest-check for multiple assertions per test.
"""
