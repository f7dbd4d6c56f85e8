"""HTTP API layer: routers and shared dependencies."""
