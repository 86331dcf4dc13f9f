"""Host adapters for the leader engine."""
