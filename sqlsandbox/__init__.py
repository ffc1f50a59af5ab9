"""Natural language to SQL, executed against a throwaway SQLite database."""

__version__ = "0.2.0"
