"""Bundled data files for doclinks."""
