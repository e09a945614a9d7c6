from .workspace import Workspace, WorkspaceManager
from .fetcher import ArchiveFetcher, snapshot_url
from .extractor import ArchiveExtractor
from .path_filter import PathFilter
from .repacker import Repacker, archive_name
from .streamer import ResponseStreamer
from .request_interpreter import RequestInterpreter
from .pipeline import Pipeline
from .deadline import Deadline

__all__ = [
    "Workspace",
    "WorkspaceManager",
    "ArchiveFetcher",
    "snapshot_url",
    "ArchiveExtractor",
    "PathFilter",
    "Repacker",
    "archive_name",
    "ResponseStreamer",
    "RequestInterpreter",
    "Pipeline",
    "Deadline",
]
