"""Exception taxonomy shared by the write and read paths."""


class MunicipioShardsError(Exception):
    """Base class for all errors raised by this package."""


class SourceUnavailable(MunicipioShardsError):
    """The source dataset could not be retrieved; the run must abort untouched."""


class MalformedLine(MunicipioShardsError):
    """An input line does not carry the five expected fields."""


class ShardWriteError(MunicipioShardsError):
    """A shard could not be written; no partial file is left under its final name."""

    def __init__(self, region: str, message: str):
        super().__init__(f"shard {region}: {message}")
        self.region = region


class ShardReadError(MunicipioShardsError):
    """A shard file is unreadable, truncated or otherwise corrupt."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
