from adapters.http_file.loader import load_request_file
from adapters.http_file.parser import parse_requests
from adapters.http_file.variables import VariableResolver

__all__ = [
    "VariableResolver",
    "load_request_file",
    "parse_requests",
]
