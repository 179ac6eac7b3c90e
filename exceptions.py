"""
Custom exceptions raised by the consultation workflow
"""


class ConsultError(Exception):
    """Base exception"""
    pass


class ValidationError(ConsultError):
    """Malformed or missing input, field names the first offending field"""
    def __init__(self, message: str, field: str = None, fields: list[str] = None):
        self.field = field
        self.fields = fields or ([field] if field else [])
        super().__init__(f"Validation failed: {message}")


class UnknownTemplateError(ConsultError):
    def __init__(self, template_name: str):
        self.template_name = template_name
        super().__init__(f"Unknown checklist template: {template_name}")


class UnknownItemError(ConsultError):
    def __init__(self, checklist_name: str, item_label: str):
        self.checklist_name = checklist_name
        self.item_label = item_label
        super().__init__(f"Unknown item '{item_label}' in checklist '{checklist_name}'")


class InvalidTransitionError(ConsultError):
    """A session state transition was attempted from an incompatible state"""
    def __init__(self, current_state: str, attempted_state: str, reason: str = None):
        self.current_state = current_state
        self.attempted_state = attempted_state
        self.reason = reason
        message = f"Cannot transition session from {current_state} to {attempted_state}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ConcurrentModificationError(ConsultError):
    """The stored record changed since it was loaded"""
    def __init__(self, kind: str, record_id, expected_version: int, actual_version: int):
        self.kind = kind
        self.record_id = record_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"{kind} {record_id} was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )


class RecordNotFoundError(ConsultError):
    def __init__(self, kind: str, record_id):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")
