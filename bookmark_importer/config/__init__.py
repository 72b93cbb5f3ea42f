"""Configuration models and loaders for the bookmark importer."""
