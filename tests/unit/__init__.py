"""
Unit tests for pure helpers (pricing, security, lock statements).
"""
