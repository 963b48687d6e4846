"""MAOS AI gateway - chat and speech brokering for the MAOS dashboard."""

__version__ = "1.0.0"
