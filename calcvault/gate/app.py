"""
View state of the disguised app: calculator, PIN setup, file manager.

The calculator's secret-access callback switches to the file manager and
binds a manager for the unlocked identity: free identities get the local
key/value vault, pro identities the database-backed one. A vault that
cannot be opened is reported to `notify` and the calculator stays up.
"""
import logging
from enum import Enum
from typing import Callable

from calcvault.accounts.service import create_user, validate_pin_setup
from calcvault.cloud.store import pro_manager
from calcvault.gate.calculator import Calculator, Identity
from calcvault.shared.db import SessionLocal
from calcvault.shared.errors import VaultError
from calcvault.vault.manager import FileManager
from calcvault.vault.tiers import free_manager

logger = logging.getLogger(__name__)


class View(str, Enum):
    CALCULATOR = "calculator"
    PIN_SETUP = "pin-setup"
    FILE_MANAGER = "file-manager"


class VaultApp:
    def __init__(
        self,
        kv,
        pro_manager_factory: Callable[[int], FileManager] | None = None,
        scheduler=None,
        notify=None,
        delay: float | None = None,
    ):
        self.kv = kv
        self.pro_manager_factory = pro_manager_factory or self._cloud_manager
        self.notify = notify
        self.view = View.CALCULATOR
        self.current_user: Identity | None = None
        self.manager: FileManager | None = None
        self._db = None
        self.calculator = Calculator(on_secret_access=self._unlock, delay=delay, scheduler=scheduler)

    def press(self, key: str) -> Identity | None:
        if self.view != View.CALCULATOR:
            raise RuntimeError(f"calculator is not showing (view={self.view.value})")
        return self.calculator.press(key)

    def _unlock(self, identity: Identity) -> None:
        try:
            self.handle_secret_access(identity)
        except VaultError as e:
            logger.warning("could not open the vault for user %s: %s", identity.user_id, e.message)
            self._close_db()
            if self.notify:
                self.notify(e)

    def handle_secret_access(self, identity: Identity) -> None:
        manager = self._manager_for(identity).mount()
        self.current_user = identity
        self.manager = manager
        self.view = View.FILE_MANAGER
        logger.info("file manager opened for user %s (%s)", identity.user_id, identity.tier)

    def _manager_for(self, identity: Identity) -> FileManager:
        if identity.is_pro:
            return self.pro_manager_factory(identity.user_id)
        return free_manager(self.kv, identity.user_id, notify=self.notify)

    def _cloud_manager(self, user_id: int) -> FileManager:
        self._close_db()
        self._db = SessionLocal()
        return pro_manager(self._db, user_id, notify=self.notify)

    def _close_db(self) -> None:
        if self._db is not None:
            self._db.close()
            self._db = None

    def back_to_calculator(self) -> None:
        self.view = View.CALCULATOR
        self.manager = None
        self._close_db()
        self.calculator.clear()

    def setup_new_pin(self) -> None:
        self.view = View.PIN_SETUP

    def finish_pin_setup(self, pin: str, user_id: int) -> Identity:
        # a new PIN only decides the tier, it does not open the vault
        self.current_user = Identity(user_id=user_id, pin=pin, tier="pro" if pin == "1234" else "free")
        self.view = View.CALCULATOR
        return self.current_user

    def submit_pin_setup(self, db, pin: str, confirm_pin: str, question: str, answer: str) -> Identity:
        """Validate the setup form, create the user, then return to the calculator."""
        validate_pin_setup(pin, confirm_pin, question, answer)
        user = create_user(db, pin, question, answer)
        return self.finish_pin_setup(pin, user.id)
