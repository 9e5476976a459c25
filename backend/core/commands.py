# core/commands.py
"""
Shared command-layer types.

Commands are the single point where business operations happen.
Views call commands; commands enforce rules and write the audit trail.

Pattern:
1. Validate permissions (require)
2. Apply business policies (can_*)
3. Perform the operation (model changes)
4. Record the audit entry (log_create / log_update / log_delete)
5. Return CommandResult
"""


class CommandResult:
    """
    Wrapper for command results with success/failure info.

    Usage:
        result = create_contact(actor, name="Acme", ...)
        if result.success:
            contact = result.data
            audit_entry = result.event
        else:
            error_message = result.error
            http_status = result.status_code
    """

    def __init__(self, success: bool, data=None, error: str = None, event=None, status_code: int = 400):
        self.success = success
        self.data = data
        self.error = error
        self.event = event  # The audit entry written, if any
        self.status_code = status_code

    @classmethod
    def ok(cls, data=None, event=None):
        return cls(success=True, data=data, event=event, status_code=200)

    @classmethod
    def fail(cls, error: str, status_code: int = 400):
        return cls(success=False, error=error, status_code=status_code)

    @classmethod
    def not_found(cls, error: str):
        return cls.fail(error, status_code=404)

    @classmethod
    def conflict(cls, error: str):
        return cls.fail(error, status_code=409)

    def __repr__(self):
        if self.success:
            return f"<CommandResult ok data={self.data!r}>"
        return f"<CommandResult fail {self.status_code} {self.error!r}>"
