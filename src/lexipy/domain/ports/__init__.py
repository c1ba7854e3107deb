"""Protocols the enrichment domain depends on."""
