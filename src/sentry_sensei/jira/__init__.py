from .client import JiraClient

__all__ = ["JiraClient"]
