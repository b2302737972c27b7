"""Document translation service built around a markup conversion core."""
