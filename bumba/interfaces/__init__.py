"""User-facing interfaces for BUMBA."""
