"""Errors that abort a build."""


class BuildError(Exception):
    """A structural problem that makes the current build attempt fail."""


class TemplateMissingError(BuildError):
    pass


class OutputWriteError(BuildError):
    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")
