"""jarfetch: resolve, download and verify server artifacts from a version catalog."""

__version__ = "0.1.0"
