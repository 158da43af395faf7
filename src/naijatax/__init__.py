"""NaijaTax backend package."""
