"""Error types raised by the document store and the ingestion routine"""


class MdsiteError(Exception):
    """Base class for all mdsite errors."""


class NotFound(MdsiteError):
    """No document matches the requested path."""

    def __init__(self, path: str):
        super().__init__(f"Document not found: {path}")
        self.path = path


class SourceUnavailable(MdsiteError):
    """The upstream data source could not be reached or returned an unusable payload."""


class SchemaMismatch(MdsiteError):
    """A batch of records does not match the schema already set on a dataset."""

    def __init__(self, dataset: str, expected: list, actual: list):
        super().__init__(
            f"Schema mismatch for dataset '{dataset}': expected {_fmt(expected)}, got {_fmt(actual)}"
        )
        self.dataset = dataset
        self.expected = expected
        self.actual = actual


class RunInProgress(MdsiteError):
    """Another ingestion run already holds the dataset lock."""


class CorruptPartition(MdsiteError):
    """A partition file no longer matches the checksum recorded when it was written."""

    def __init__(self, dataset: str, file: str):
        super().__init__(f"Partition {file} of dataset '{dataset}' failed its checksum")
        self.dataset = dataset
        self.file = file


def _fmt(columns: list) -> str:
    return "{" + ", ".join(f"{c['name']}: {c['type']}" for c in columns) + "}"
