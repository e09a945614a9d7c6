"""Repo tarball service: remote repository snapshot -> streamed .tar.gz."""

__version__ = "1.0.0"
