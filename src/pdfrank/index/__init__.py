"""Corpus index, ranking and persistence."""
