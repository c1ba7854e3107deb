"""Enrichment reconciliation: collect, record, merge and apply provider suggestions."""
