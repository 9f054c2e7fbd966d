"""Receipt parsing, review and formatting (pure, no runtime imports)."""
