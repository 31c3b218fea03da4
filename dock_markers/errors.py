class InvalidArgument(ValueError):
    """Malformed configuration or arguments; the run must not produce output."""
