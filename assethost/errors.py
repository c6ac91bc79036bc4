class AssetHostError(Exception):
    pass


class MalformedTarget(AssetHostError, ValueError):
    """The request target cannot be parsed as a URL."""

    def __init__(self, target: str, reason: str) -> None:
        super().__init__(f"Error parsing URI '{target}': {reason}")
        self.target = target


class BadRequest(AssetHostError, ValueError):
    pass


class CommandError(AssetHostError):
    """A command failure; str(error) is the message returned to the caller."""


class SaveNotFound(CommandError):
    def __init__(self) -> None:
        super().__init__("Save file not found")


class GameFileNotFound(CommandError):
    def __init__(self) -> None:
        super().__init__("File not found")


class WindowNotFound(CommandError):
    def __init__(self) -> None:
        super().__init__("Window not found")


class UnknownCommand(CommandError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown command: {name}")


class StorageError(CommandError):
    def __init__(self, action: str, cause: Exception) -> None:
        super().__init__(f"Failed to {action}: {cause}")
        self.cause = cause
