"""
Presentation Layer - HTTP API (FastAPI routers, auth dependency).
"""
