"""
Finance Engine - Source Package

Budget and goal analytics for a personal-finance application:
records in, display-ready figures out.

DESIGN PRINCIPLES:
1. The engine is pure: snapshot in, report out, no side effects
2. Money is Decimal, never float
3. Fail early, fail visibly
4. No silent corrections
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Engine Team"
