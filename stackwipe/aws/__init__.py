"""AWS session and credential helpers."""
