"""Command-line interface for tempo-sync."""

from __future__ import annotations

import asyncio as asyncio
import logging as logging

from tempo_sync import TempoSync as TempoSync
from tempo_sync import load_config as load_config
from tempo_sync.cli.app import main as main
from tempo_sync.cli.commands import status as status_command
from tempo_sync.cli.commands import sync as sync_command
from tempo_sync.cli.parser import _package_version as _package_version
from tempo_sync.cli.parser import build_parser as build_parser
from tempo_sync.remote import TempoClient as TempoClient

_format_summary = sync_command.format_sync_summary
_format_status = status_command.format_status

_run_sync = sync_command.run_sync
_run_status = status_command.run_status
