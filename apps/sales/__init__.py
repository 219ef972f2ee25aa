"""
Sales app for jewellery shop invoicing.

Checkout turns a cart plus the current metal rate into a finalized invoice
while decrementing stock for every sold unit.
"""
