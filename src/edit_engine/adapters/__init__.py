"""Host integrations for the edit engine."""
