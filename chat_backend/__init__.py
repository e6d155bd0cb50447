"""Chat API — sessions and messages behind an API key and per-client rate limit."""
