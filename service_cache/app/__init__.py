"""
Cache service application package.

Wires a key-value store client into a cache-aside interceptor chain and
exposes the cached route through FastAPI.
"""
