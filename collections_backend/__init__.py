"""
Collections backend.

A FastAPI service that registers users and stores saved HTTP request
templates ("collections") in MySQL through a bounded connection pool.
"""
