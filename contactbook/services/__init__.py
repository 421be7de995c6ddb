"""
High-level use cases for the contact book.

Routers and scripts call these services instead of the repository so that
validation and not-found handling live in one place.
"""
