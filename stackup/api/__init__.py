"""REST API for stackup."""
