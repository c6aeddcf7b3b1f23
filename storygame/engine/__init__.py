# storygame/engine/__init__.py

"""Engine package providing the tagger adapters.

This package contains the tagger interface that turns raw text into
offset-anchored, classified words, and its spaCy implementation.
"""
