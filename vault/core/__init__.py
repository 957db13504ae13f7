"""
Core utilities shared across the vault.

Configuration (environment-backed Settings) and logging setup live here so
that services and controllers do not read os.environ or touch handlers.
"""
