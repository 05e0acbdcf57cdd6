"""Context assembly for codebase resources."""
