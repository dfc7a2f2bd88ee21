"""Application layer: stateful components and use cases."""
