"""Identity provider bindings."""
