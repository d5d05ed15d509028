"""Command-line tools: score a snapshot file, weekly batch recalculation."""
