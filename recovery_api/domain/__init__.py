"""Domain records and enumerations (no persistence or HTTP concerns)."""
