import httpx

from ..config import DEFAULT_CHAT_ENDPOINT, HEURISTIC_DELAY, WidgetConfig
from .chain import ResponseResolver
from .strategies import CallbackStrategy, HeuristicStrategy, RemoteApiStrategy, ReplyCallback


def create_response_resolver(
    callback: ReplyCallback | None = None,
    credential: str | None = None,
    endpoint: str = DEFAULT_CHAT_ENDPOINT,
    heuristic_delay: float = HEURISTIC_DELAY,
    client: httpx.AsyncClient | None = None,
    timeout: float | None = None,
) -> ResponseResolver:
    """Create the reply strategy chain.

    This factory hides the precedence rules: an injected callback always wins,
    a credential enables the remote endpoint, and the local heuristic answers
    otherwise.

    Args:
        callback: Optional reply-producing function (sync or async)
        credential: Optional opaque credential for the remote endpoint
        endpoint: Remote chat endpoint URL
        heuristic_delay: Artificial latency of the local fallback in seconds
        client: Optional shared httpx client for the remote endpoint
        timeout: Remote request timeout, None to wait indefinitely

    Returns:
        ResponseResolver with strategies in priority order

    Examples:
        >>> resolver = create_response_resolver()
        >>> resolver.select().name
        'heuristic'

        >>> resolver = create_response_resolver(credential="token")
        >>> resolver.select().name
        'remote'
    """
    return ResponseResolver([
        CallbackStrategy(callback),
        RemoteApiStrategy(credential, endpoint=endpoint, client=client, timeout=timeout),
        HeuristicStrategy(delay=heuristic_delay),
    ])


def resolver_from_config(
    config: WidgetConfig,
    callback: ReplyCallback | None = None,
    client: httpx.AsyncClient | None = None,
) -> ResponseResolver:
    """Create the resolver chain for a widget configuration."""
    return create_response_resolver(
        callback=callback,
        credential=config.credential,
        endpoint=config.endpoint,
        heuristic_delay=config.heuristic_delay,
        client=client,
        timeout=config.remote_timeout,
    )
