"""
Shared test configuration.
Settings are read at import time, so the environment is fixed before any
application module is imported.
"""

import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
