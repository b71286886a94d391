from __future__ import annotations

from plugin_sdk.core.errors import ParseError

from .percentage import Percentage, marshal_json, unmarshal_json

__all__ = ["ParseError", "Percentage", "marshal_json", "unmarshal_json"]
