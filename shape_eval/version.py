"""Version information."""

VERSION = "0.1.0"
