"""GitHub access for populating the entity store."""
