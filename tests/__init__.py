"""Test package for the Match Insight client.

Unit tests for isolated pipeline stages and integration tests for the
transport and session controller over real HTTP plumbing.

Structure:
    - unit/: Decoder, classifier, normalizer, reducer, config, session
    - integration/: Transport and sessions against a stub backend
    - streams.py: Stream builders, fake transport and stub backend

Leverages pytest with pytest-check for soft assertions.
"""
