from .http import create_app, run_http
from .processor import MCPProcessor, ProcessorResponse
from .stdio import serve_stdio

__all__ = ["MCPProcessor", "ProcessorResponse", "create_app", "run_http", "serve_stdio"]
