"""Calculation services for the NaijaTax backend."""
