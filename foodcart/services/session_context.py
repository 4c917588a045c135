import logging
import threading
from typing import Optional, Union


class SessionContext:
    """Holds the account currently acting on the cart and order history.

    Account identifiers are opaque; they are normalised to strings since they
    key the persisted history mapping.
    """

    def __init__(self) -> None:
        self._account_id: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def current_account(self) -> Optional[str]:
        with self._lock:
            return self._account_id

    @property
    def is_signed_in(self) -> bool:
        return self.current_account is not None

    def sign_in(self, account_id: Union[str, int]) -> str:
        account = str(account_id)
        with self._lock:
            self._account_id = account
        logging.info(f"SESSION >>> Account {account} signed in")
        return account

    def sign_out(self) -> None:
        with self._lock:
            account, self._account_id = self._account_id, None
        if account is not None:
            logging.info(f"SESSION >>> Account {account} signed out")
