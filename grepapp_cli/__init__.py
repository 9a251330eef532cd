"""Paginated grep.app code search with per-file line aggregation."""
