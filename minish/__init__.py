"""A small interactive shell: parsing, expansion, redirections, here-documents and pipelines."""

__version__ = "0.1.0"
__all__ = ["__version__"]