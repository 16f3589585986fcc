"""Formatting, QR rendering and logging helpers shared by the app layer."""
