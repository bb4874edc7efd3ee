"""Sphinx configuration for the discovery-search project.

The configuration enables MyST Markdown, autosummary, autodoc, and napoleon.
It discovers project modules from the repository root so that API
documentation can be generated for the `paging`, `discovery`, `shared` and
`api` packages without additional path tweaks during builds.
"""

import os
import sys
from datetime import datetime


# -- Path setup --------------------------------------------------------------
PROJECT_ROOT = os.path.abspath("..")
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


# -- Project information -----------------------------------------------------
project = "discovery-search"
author = "discovery-search contributors"
current_year = str(datetime.now().year)
copyright = f"{current_year}, {author}"


# -- General configuration ---------------------------------------------------
extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
    "sphinx.ext.intersphinx",
    "sphinx.ext.viewcode",
]

autosummary_generate = True
autosummary_imported_members = True
autodoc_typehints = "description"
autodoc_default_options = {
    "members": True,
    "undoc-members": True,
    "show-inheritance": True,
}

# Mock third-party imports so doc builds do not need the runtime stack
autodoc_mock_imports = [
    "dotenv",
    "fastapi",
    "loguru",
    "requests",
    "uvicorn",
]

templates_path = ["_templates"]
exclude_patterns: list[str] = ["_build", "Thumbs.db", ".DS_Store"]

source_suffix = {".rst": "restructuredtext", ".md": "markdown"}
myst_enable_extensions = ["colon_fence", "deflist", "fieldlist"]


# -- Options for HTML output -------------------------------------------------
html_theme = "furo"
html_title = project


# -- Intersphinx -------------------------------------------------------------
intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "pydantic": ("https://docs.pydantic.dev/latest", None),
}
