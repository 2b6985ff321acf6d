"""
Y-Travels RAG backend

Embedding cache and nearest-neighbor retrieval for the Y-TravelBot assistant.
"""

__version__ = '1.0.0'
