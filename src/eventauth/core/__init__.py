"""Core configuration, logging and time utilities for EventAuth."""
