"""Event weight calculators for neutrino cross-section systematics."""

__version__ = "0.1.0"