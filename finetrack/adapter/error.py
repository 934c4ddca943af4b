"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class PushChannelError(AdapterError):
    """Push channel could not be established or has been closed."""

    pass
