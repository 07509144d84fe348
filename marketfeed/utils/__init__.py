"""Small helpers shared across the adapter."""
