"""
lspinstall.core — configuration, logging, and shared infrastructure.

Modules:
    config      Configuration loading (TOML + env vars)
    constants   Filesystem layout, defaults, limits
    exceptions  lspinstall exception hierarchy
    logging     structlog configuration
"""
