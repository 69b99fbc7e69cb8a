"""Services implementing the survey resume workflow."""
