"""Engine definitions, request builders and response types."""
