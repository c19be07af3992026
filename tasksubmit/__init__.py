"""Client-side session, submission and evaluation layer for TaskSubmit."""

from tasksubmit.context import AppContext, create_context

__all__ = ["AppContext", "create_context"]
