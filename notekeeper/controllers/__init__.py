"""Screen controllers package."""
