# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import make_loan, make_investment
"""

from .utils import make_investment, make_loan, make_loan_parameters

__all__ = ["make_loan", "make_loan_parameters", "make_investment"]
