"""White Hat Link site backend: canonical URLs, CSP headers, inventory and inquiries."""

__version__ = "0.1.0"
