"""HTTP surface for Weekboard (FastAPI)."""
