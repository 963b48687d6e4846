"""Shared helpers: errors, logging, request context and fallback chains."""
