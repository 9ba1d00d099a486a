"""Top‑level package for the checkout application.

This package exposes the product catalogue types via :mod:`products`, the
shopping cart via :mod:`cart`, shipping aggregation in :mod:`shipping` and
the checkout routine in :mod:`checkout`.
"""
