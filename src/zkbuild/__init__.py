"""zkbuild - dependency-ordered, per-file Solidity compilation."""

__version__ = "0.1.0"
