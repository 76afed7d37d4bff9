"""Endpoint resolution, vendor format parsing, and status aggregation."""
