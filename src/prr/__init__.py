"""prr - squash-merge GitHub pull requests with reviewer attribution."""

__version__ = "0.1.0"
