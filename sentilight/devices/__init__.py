"""Device transport: Tasmota HTTP command fan-out."""

from .tasmota import TasmotaClient, DispatchReport, build_command_url, encode_command

__all__ = ['TasmotaClient', 'DispatchReport', 'build_command_url', 'encode_command']
