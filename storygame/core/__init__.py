# storygame/core/__init__.py

"""Core domain models and utilities used across the story game.

This package provides domain types, exceptions, and the vocabulary loader
shared by the rest of the application.
"""
