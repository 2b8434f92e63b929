"""Application configuration and logging for the task tracker service."""
