"""Survey chat relay: LLM relay with per-session history and CSV logging."""
