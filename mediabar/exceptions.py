#!/usr/bin/env python3
"""errors raised while fetching media information"""


class MediaServiceError(Exception):
    """Base exception for anything that goes wrong during a fetch

    str() of any instance is the human-readable message that ends up
    in ServiceStatus.lasterror
    """


class LaunchFailed(MediaServiceError):
    """the media query executable could not be started"""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"failed to launch media query command: {detail}")


class ExecutableNotFound(LaunchFailed):
    """the media query executable does not exist"""

    def __init__(self, path: str):  # pylint: disable=super-init-not-called
        self.path = path
        self.detail = f"{path} not found"
        MediaServiceError.__init__(
            self,
            f"media query command not found at {path}; please ensure media-control is installed",
        )


class CommandFailed(MediaServiceError):
    """the executable ran but exited non-zero"""

    def __init__(self, output: str):
        self.output = output
        super().__init__(f"media query command failed: {output}")


class EmptyResponse(MediaServiceError):
    """the executable exited cleanly but printed nothing"""

    def __init__(self):
        super().__init__("no response from media query command")


class ParseFailed(MediaServiceError):
    """the output was neither media information nor a no-media notice"""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"failed to parse media information: {detail}")
