"""Find duplicate video files by filename and resolve them interactively."""

__version__ = "0.1.0"
