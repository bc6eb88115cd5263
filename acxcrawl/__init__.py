"""ACX crawler: articles, comment trees and article bodies into SQLite."""

__version__ = "0.1.0"
