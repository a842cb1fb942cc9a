"""Domain rules of rights management.

This package holds the search term grammar, the search filters and the
validity window rules, independent from *where* they are applied
(services, repositories, etc.).
"""
