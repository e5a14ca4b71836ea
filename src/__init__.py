"""Similarity-aware two-tier cache for LLM text summaries."""
