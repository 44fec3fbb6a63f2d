"""Usage errors raised by the user command handlers."""


class UsageError(Exception):
    """The invocation itself is invalid (missing id, bad patch file, conflicting flags)."""

    pass


class FatalUsageError(UsageError):
    """A usage error the CLI terminates on immediately instead of reporting."""

    pass
