"""rngrename - Rename files to random names without collisions."""
