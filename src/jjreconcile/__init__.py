"""jjreconcile - interactive resolution of divergent jj changes."""

__version__ = "0.1.0"
