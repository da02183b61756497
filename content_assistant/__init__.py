"""
Content Assistant.

Generates article ideas with an LLM, expands approved ideas into drafts,
strips template scaffolding from the generated text, and stores or
publishes the results.
"""

__version__ = "1.0.0"
