from .dry_run import DryRunWrapper
from .logging_wrapper import LoggingWrapper

__all__ = ["DryRunWrapper", "LoggingWrapper"]
