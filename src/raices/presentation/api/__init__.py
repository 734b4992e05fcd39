"""HTTP API for the RaícesMX backend."""
