"""
Today I Learned - a fact-sharing board.

Users share short facts tagged by category, browse them by category,
and vote on how credible each one is:
- Share a fact with a trustworthy source
- Filter the board by category
- Vote facts interesting, mindblowing or false
"""

__version__ = "0.1.0"
