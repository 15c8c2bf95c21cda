"""
Domain Layer - canonical entities, value models and ports

No I/O happens in this package.
"""
