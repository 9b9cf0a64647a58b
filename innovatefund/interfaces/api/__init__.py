"""FastAPI routers, dependencies and schemas."""
