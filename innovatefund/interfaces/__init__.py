"""Delivery interfaces: the HTTP API and its schemas."""
