"""Command line interface for docsections."""
