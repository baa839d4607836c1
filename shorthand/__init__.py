"""gh-shorthand — GitHub shorthand expansion for launcher script filters."""

__version__ = "0.1.0"
