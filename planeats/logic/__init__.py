"""Core business logic layer.

Subpackages:
- shopping: ingredient categorization and meal-plan shopping list aggregation
- reporting: per-day nutrition totals
- ai: meal-plan prompts, LLM provider fallback and response parsing
"""
__all__ = ["shopping", "reporting", "ai"]
