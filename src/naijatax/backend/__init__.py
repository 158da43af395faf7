"""Backend services for the NaijaTax calculation engine."""
