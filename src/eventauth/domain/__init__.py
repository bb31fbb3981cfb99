"""Domain layer for EventAuth: entities, exceptions and auth use cases."""
