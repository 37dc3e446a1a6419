"""Adapters Django (driving e driven) sobre o core."""
