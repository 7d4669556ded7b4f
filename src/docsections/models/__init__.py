"""Pydantic models for docsections."""
