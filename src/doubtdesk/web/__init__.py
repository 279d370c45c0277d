"""HTTP layer for Doubt Desk."""
