"""Core pagination domain: settings, errors, collaborators and the paginator."""
