"""Survey save-and-resume service."""
