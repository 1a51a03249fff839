"""HexSignal: hex-grid signal-strength maps from operator measurements."""

__version__ = "0.1.0"
