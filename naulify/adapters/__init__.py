"""Adapter package for external I/O implementations.

Purpose:
    Collect concrete implementations for domain ports (identity provider and
    document store over REST, in-memory doubles, local settings storage).

Dependencies:
    Individual submodules depend on ``requests``, filesystem APIs, and domain
    protocol definitions.

Call context:
    Imported by ``naulify.app.container`` for runtime wiring and by tests for
    doubles and transport-level behavior verification.
"""
