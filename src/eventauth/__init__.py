"""EventAuth - authentication for the event recommendation service.

Issues, verifies and refreshes bearer tokens and guards protected routes.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
