"""Bundled adapter implementations."""
