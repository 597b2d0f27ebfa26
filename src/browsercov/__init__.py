"""browsercov: application-script coverage from browser precise-coverage snapshots."""

__version__ = "0.1.0"
