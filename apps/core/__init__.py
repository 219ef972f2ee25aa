"""
Core app: tenants, users and store settings.
"""
