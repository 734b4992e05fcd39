"""RaícesMX marketplace backend."""
