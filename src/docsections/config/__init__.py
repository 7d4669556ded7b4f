"""Configuration loading and defaults for docsections.

Main components:
- docsections.config.defaults: Heading/sufficiency thresholds and service
  defaults, importable without pulling in the loader
- docsections.config.loader.ConfigLoader: Resolve settings from YAML and
  environment variables
- docsections.config.loader.ocr_config_from_env: Document AI settings from
  the environment
"""
