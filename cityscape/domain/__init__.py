"""Domain layer: layout, encoding and render-state derivation."""
