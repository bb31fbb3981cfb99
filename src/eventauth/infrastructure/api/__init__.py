"""HTTP API for EventAuth: application factory, routes, schemas and dependencies."""
