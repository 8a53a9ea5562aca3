"""Model lookup pipeline: name resolution, field selection, scopes and shaping."""
