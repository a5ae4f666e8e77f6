"""HTTP layer: route registration and error handlers."""
