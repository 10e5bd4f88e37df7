"""Settings and logging setup for host applications."""
