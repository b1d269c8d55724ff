"""HTTP API for the lesson planner."""
