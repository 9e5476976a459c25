"""
Core app - shared plumbing for the ledger backend.

This app provides:
- SoftDeleteModel: abstract base with is_deleted/deleted_at/deleted_by
- AuditLog: append-only record of who changed what
- CommandResult: return type of every command function
- Export, pagination and date helpers used by the domain apps
"""
