"""
Product-Level Monthly Purchase Forecasting

Fits a small neural regressor on calendar month (cyclically encoded) and
product identity, then projects quantity sold for one product over the
next six months.
"""

__version__ = "1.0.0"
__author__ = "Forecasting Team"
