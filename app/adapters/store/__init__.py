"""Counter store adapters.

The rate limiter only needs atomic ``INCR`` and ``EXPIRE``; Redis provides
both and is shared by every worker process of the service.
"""

from app.adapters.store.redis_client import CounterStore, get_client

__all__ = ["CounterStore", "get_client"]
