"""API Layer — FastAPI routes, dependency providers, and error handlers."""
