"""Health checks run by the scheduler."""
