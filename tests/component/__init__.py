"""
Component tests for the storefront API

These tests drive the FastAPI app through TestClient and check the interaction
between routers, services, repositories and the database (SQLite in memory).
"""
