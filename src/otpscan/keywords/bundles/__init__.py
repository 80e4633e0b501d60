"""Packaged keyword bundles, one YAML file per locale."""
