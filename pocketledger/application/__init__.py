"""Application workflows that combine pure domain logic with runtime services."""
