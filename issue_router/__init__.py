"""Issue Router: label prediction for GitHub issues by analogy.

Fetches issues from GitHub, indexes them into a pgvector table, and asks an
LLM to predict labels for new issues, either from similar indexed issues or
directly against a closed label vocabulary.
"""

__version__ = "0.1.0"
