"""Contact book backend: contacts with one postal address each, stored in SQL."""

__version__ = "0.1.0"
