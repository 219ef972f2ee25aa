"""
Inventory app for jewellery stock management.
"""
