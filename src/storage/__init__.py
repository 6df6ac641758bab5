"""Table-oriented async record stores."""
