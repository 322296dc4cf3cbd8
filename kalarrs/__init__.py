"""kalarrs: bootstrap local toolchains and scaffold serverless workspaces."""

__version__ = "0.1.0"
