from __future__ import annotations


class BuildError(Exception):
    """Base class for fatal build failures."""


class DiscoveryError(BuildError):
    pass


class CompilerError(BuildError):
    def __init__(self, version: str, command: list[str], exit_code: int | None, reason: str = ""):
        self.version = version
        self.command = command
        self.exit_code = exit_code
        detail = reason or f"exit code {exit_code}"
        super().__init__(f"Compiler failed for {version} ({detail}): {' '.join(command)}")


class ArtifactNameError(BuildError, ValueError):
    """A compiler output name could not be mapped back to its source."""


class UnsupportedPathError(ArtifactNameError):
    pass
