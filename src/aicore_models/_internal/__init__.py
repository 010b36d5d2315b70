"""Internal building blocks shared across aicore_models."""
