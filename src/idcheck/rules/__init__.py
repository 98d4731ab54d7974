"""Rule data, normalization and checksum algorithms."""
