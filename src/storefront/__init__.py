"""Storefront: watch catalogue and order management backend."""
