"""Static schema documents used when the connector runs in ``static`` schema mode."""
