"""Application composition: configuration, wiring and the command-line entry point."""
