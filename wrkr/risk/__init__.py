"""Risk classification, scoring and ranking."""
