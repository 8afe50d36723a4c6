# app/chain/accounts.py
from errors import NoAccountsError, UpstreamReadError


class AccountSelector:
    """Picks the signer for write calls: the node's first unlocked account.

    Re-evaluated on every write; no user is pinned to an account.
    """

    def __init__(self, w3):
        self.w3 = w3

    async def select(self) -> str:
        try:
            accounts = await self.w3.eth.accounts
        except Exception as e:
            raise UpstreamReadError("Failed to list node accounts", details=e) from e

        if not accounts:
            raise NoAccountsError()
        return accounts[0]
