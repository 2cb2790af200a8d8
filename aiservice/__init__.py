"""
AI assistant service: LLM prompting with fuzzy-filtered vector retrieval.
"""

__version__ = "1.0.0"
