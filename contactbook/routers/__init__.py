"""
FastAPI routers.

Routers translate HTTP input into domain values and call the services; they
hold no persistence logic of their own.
"""
