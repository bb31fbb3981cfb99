"""Infrastructure layer for EventAuth: auth components, persistence and HTTP API."""
