"""API routes (mounted under /api/v1)."""
