"""Package data bundled with the connector."""
