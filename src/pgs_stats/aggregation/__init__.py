"""Aggregation module for catalog summaries.

- Reads record collections and produces summaries (frequency tables,
  variants distribution)
- Forbidden: network calls, cache access, rendering
"""
