"""Content engine core: models, strategy, validation."""
