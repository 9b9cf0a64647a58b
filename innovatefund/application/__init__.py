"""Application layer: use cases orchestrating repositories and delivery."""
