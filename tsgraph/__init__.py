"""tsgraph: map TypeScript source files to typed code-graph fragments."""

__version__ = "0.1.0"
