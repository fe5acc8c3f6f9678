"""Stratus: typed client for cluster orchestration REST APIs.

Public API:
    - Descriptor / Field / Component / Kind: static field tables for records
    - decode_into(), decode_slice_into(), project_to_map(): the projector
    - Result: decoded body plus headers, with version-aware extraction
    - ServiceClient / Config: request seam and its configuration
    - clustering.receivers: receiver CRUD, listing and notify
"""

from __future__ import annotations

import logging

from stratus.client import ServiceClient
from stratus.config import Config
from stratus.descriptors import ZERO_TIME, Component, Descriptor, Field, Kind
from stratus.errors import (
    APIError,
    ConfigurationError,
    DecodeError,
    StratusError,
    TimeParseError,
    TypeMismatchError,
)
from stratus.pagination import Page, Pager
from stratus.projector import (
    decode_into,
    decode_record,
    decode_slice_into,
    project_slice_to_map,
    project_to_map,
)
from stratus.result import Result
from stratus.versions import LATEST, ApiVersion

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("stratus-sdk")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("stratus").addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Projector
    "decode_into",
    "decode_record",
    "decode_slice_into",
    "project_to_map",
    "project_slice_to_map",
    # Descriptors and versions
    "Descriptor",
    "Field",
    "Component",
    "Kind",
    "ZERO_TIME",
    "ApiVersion",
    "LATEST",
    # Client surface
    "Config",
    "Page",
    "Pager",
    "Result",
    "ServiceClient",
    # Errors
    "StratusError",
    "APIError",
    "ConfigurationError",
    "DecodeError",
    "TimeParseError",
    "TypeMismatchError",
]
