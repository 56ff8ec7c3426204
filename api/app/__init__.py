"""DevConnector API application package."""
