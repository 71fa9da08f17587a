from .callback import CallbackStrategy, ReplyCallback
from .heuristic import HeuristicStrategy
from .remote import RemoteApiStrategy

__all__ = ["CallbackStrategy", "HeuristicStrategy", "RemoteApiStrategy", "ReplyCallback"]
