"""Normalization, aggregation and enrichment stages."""
