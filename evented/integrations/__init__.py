"""Storage integrations for evented."""
