"""Pure domain layer: value objects, entity records, clock."""
