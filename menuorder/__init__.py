"""Menu order service: ordered service menus backed by a relational store."""

__version__ = "0.1.0"
