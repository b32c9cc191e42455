"""Usecases package."""
