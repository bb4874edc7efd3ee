"""REST API service package for project search sessions.

Exposes FastAPI endpoints that host one search pipeline per session. Import
`api.app.app` to run the server.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
