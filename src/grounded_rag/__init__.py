"""Grounded RAG — chunk, embed and index documents; answer questions from them."""

__version__ = "0.1.0"
