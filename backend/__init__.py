"""Backend package for the natural selection simulation API.

This package provides the FastAPI web server and the background runner
that drives a simulation controller in real time.
"""

__version__ = "0.1.0"
