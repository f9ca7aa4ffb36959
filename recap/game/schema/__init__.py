"""Value types, lookup tables and normalizers shared across the summary pipeline."""
