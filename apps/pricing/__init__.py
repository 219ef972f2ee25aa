"""
Pricing engine: weight-based line pricing and invoice totals.
"""
