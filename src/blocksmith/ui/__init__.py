"""User-facing interfaces for blocksmith."""
