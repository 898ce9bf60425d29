"""accessguard - element-level permission evaluation and impersonation audit."""

__version__ = "0.1.0"
