"""Core document-structure recovery and extraction collaborators."""
