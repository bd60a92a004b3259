"""userlists: REST API for "following" and "followers" username lists."""

__version__ = "0.1.0"
