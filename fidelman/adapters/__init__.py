"""Default collaborator adapters backed by fidelman's own models."""
