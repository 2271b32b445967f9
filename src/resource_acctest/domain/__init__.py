"""Domain layer: resource schemas, instances, tags and the error taxonomy."""
