"""Domain layer: model, exceptions, ports."""
