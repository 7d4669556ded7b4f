"""Click commands for the docsections CLI."""
