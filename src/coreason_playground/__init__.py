# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

"""
coreason-playground
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .config import PlaygroundConfig
from .editor import EditorState
from .factory import GatewayFactory
from .files import FileStore
from .gateway import RuntimeGateway
from .gateways.docker import DockerGateway
from .gateways.local import LocalGateway
from .models import ExecutionResult, File, OutputEntry, RunState
from .output import OutputSink
from .session import ExecutionSession

__all__ = [
    "EditorState",
    "ExecutionSession",
    "FileStore",
    "OutputSink",
    "RuntimeGateway",
    "LocalGateway",
    "DockerGateway",
    "GatewayFactory",
    "PlaygroundConfig",
    "ExecutionResult",
    "File",
    "OutputEntry",
    "RunState",
]
