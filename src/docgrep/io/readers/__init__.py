"""Document readers returning plain text."""
