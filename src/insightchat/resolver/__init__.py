from .base import ReplyStrategy
from .chain import ResponseResolver
from .factory import create_response_resolver, resolver_from_config
from .strategies import CallbackStrategy, HeuristicStrategy, RemoteApiStrategy, ReplyCallback

__all__ = [
    "ReplyStrategy",
    "ResponseResolver",
    "create_response_resolver",
    "resolver_from_config",
    "CallbackStrategy",
    "HeuristicStrategy",
    "RemoteApiStrategy",
    "ReplyCallback",
]
