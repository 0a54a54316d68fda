"""Infrastructure adapters (logging, MongoDB)."""
