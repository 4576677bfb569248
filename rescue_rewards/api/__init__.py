"""HTTP API for Rescue Rewards."""
