"""Global pytest configuration."""

import os

# Keep tests on in-memory tiers regardless of the developer's .env
os.environ.setdefault("CACHE_BACKEND", "memory")
os.environ.setdefault("REMOTE_BACKEND", "memory")
