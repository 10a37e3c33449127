"""General-purpose commands (latency check, command listing)."""
