from .user import UserFactory
from .report import ReportFactory

__all__ = ["UserFactory", "ReportFactory"]
