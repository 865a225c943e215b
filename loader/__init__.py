"""
Record loading package.

Every supported data shape sits behind ``RecordSource.load()``::

    from loader import source_from_config
    from utils.config import LoadConfig

    result = source_from_config(LoadConfig()).load()
    result.records          # tuple[Record, ...] in index order
    result.report           # StepReport with missing-resource skips
"""

from loader.sources import (
    CombinedFileSource,
    DirectoryRecordSource,
    HttpCombinedSource,
    HttpRecordSource,
    LoadResult,
    NumberedRecordSource,
    RecordSource,
    read_json_file,
    records_from_array,
    source_from_config,
)

__all__ = [
    "CombinedFileSource",
    "DirectoryRecordSource",
    "HttpCombinedSource",
    "HttpRecordSource",
    "LoadResult",
    "NumberedRecordSource",
    "RecordSource",
    "read_json_file",
    "records_from_array",
    "source_from_config",
]
