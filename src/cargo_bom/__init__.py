"""Bill of Materials reports for Cargo workspaces."""

__version__ = "0.4.0"
