"""pacfetch: pacman statistics beside ASCII art."""

__version__ = "0.4.0"
