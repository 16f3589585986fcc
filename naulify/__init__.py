"""Naulify: fare-collection companion for matatu operators.

Layers:
    ``domain`` (records, validation, ports), ``adapters`` (REST and in-memory
    backends), ``repositories`` (async data access), ``viewmodels`` (screen
    state machines) and ``app`` (configuration, wiring, CLI).
"""

__version__ = "0.1.0"
