class NotificationError(Exception):
    """Base class for errors surfaced by user-initiated notification actions."""

class AuthenticationRequired(NotificationError):
    pass

class NotFound(NotificationError):
    pass

class DeliveryFailed(NotificationError):
    def __init__(self, status_code: int, detail=None):
        super().__init__(f"Push delivery failed with status {status_code}")
        self.status_code = status_code
        self.detail = detail
