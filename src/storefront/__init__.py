"""Storefront checkout engine — shopping cart, promo codes, checkout and order editing.

Tracks a shopper's cart across sessions, keeps applied promo codes honest as
the subtotal changes, and submits or edits orders through the external order
service.
"""

__version__ = "0.1.0"
