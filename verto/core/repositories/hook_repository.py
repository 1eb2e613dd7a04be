from abc import ABC, abstractmethod


class SwapHookRepository(ABC):
    """
    Port for the post-swap notification (webhook). Implementations must not
    raise: a failing notification never affects the swap result.
    """

    @abstractmethod
    async def notify_transaction(self, order_id: str) -> None:
        raise NotImplementedError
