"""Pydantic models for node metadata."""
