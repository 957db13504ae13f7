"""
Use cases for the vault.

Each service module orchestrates the repository to implement the record
workflows (add, search, sort, backup, reporting). The menu and the HTTP routes
call these services instead of querying the database directly.
"""
