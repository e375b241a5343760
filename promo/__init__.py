"""Generate tags, social posts, video titles and images for user-group meetings."""

__version__ = "0.1.0"
