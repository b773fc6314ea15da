"""SoleMate storefront guest session and migration service"""

__version__ = "1.0.0"
