"""
pathgen - turn free-text documents into generated learning paths.

Ingest path:     raw text -> heading sections -> packed chunks -> stored sections
Generation path: stored sections -> batched generation (or fallback) -> activities
"""

__version__ = "1.0.0"
