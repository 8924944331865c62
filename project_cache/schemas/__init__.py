"""API schemas (pydantic models for request/response bodies)."""
