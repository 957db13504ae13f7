"""Secure Data Vault: named records with creation dates, a text menu and a JSON API."""
