from .manager import SessionManager, SessionState
from .navigation import ViewRouter, Page, Screen

__all__ = ["SessionManager", "SessionState", "ViewRouter", "Page", "Screen"]
