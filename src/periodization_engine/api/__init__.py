"""HTTP API for the periodization engine."""
