"""Find a Git author's commits, browse them in the terminal and export them to Excel or CSV."""

__version__ = "0.1.0"