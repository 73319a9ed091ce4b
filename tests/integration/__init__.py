"""Integration tests against real Redis (skipped when REDIS_URL is unset)."""
