"""Packaged data files (curated cross-venue match table)."""
