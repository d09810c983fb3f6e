"""gitpulse core."""
