"""Rule capability interface, built-in predicates, and the custom rule registry."""
