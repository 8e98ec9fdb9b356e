"""
Content — Static text installed into agent instruction files

Text is data, not code embedded in methods.
"""

from .rules import rules_text

__all__ = ['rules_text']
