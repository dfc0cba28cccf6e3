"""Request-dispatch core shared by the sync and async connections."""
