"""
Shop package: cart, wishlist, checkout and simulated payment.
"""
