"""Settlement performer: validates settlement tasks and commits to their inputs."""

__version__ = "0.1.0"
