"""lumpgen package

Builds the PNAMES and TEXTURE1 lumps, flat/patch hard links and the
wadinfo manifest for a WAD from a declarative YAML texture spec.

Prefer :mod:`lumpgen.api` for programmatic use and :mod:`lumpgen.cli` for
the command line entry point.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
