import asyncio

import pytest

from calcvault.cloud.service import list_files
from calcvault.cloud.store import pro_manager
from calcvault.gate.app import VaultApp, View
from calcvault.shared.errors import PersistenceFailure
from calcvault.vault.ingest import BytesUpload
from calcvault.vault.store import LocalRecordStore, MemoryStore, key_for


def immediate(delay, fn):
    fn()


def press_all(app, keys):
    for k in keys:
        app.press(k)


def test_free_code_opens_local_vault():
    kv = MemoryStore()
    app = VaultApp(kv, scheduler=immediate)
    press_all(app, "7360=")
    assert app.view == View.FILE_MANAGER
    assert app.current_user.user_id == 2 and app.current_user.tier == "free"
    assert app.manager.max_storage_mb == 50
    asyncio.run(app.manager.upload([BytesUpload("a.txt", b"hi", "text/plain")]))
    assert LocalRecordStore(kv).load(2)[0].name == "a.txt"


def test_pro_code_opens_cloud_vault(db, make_image):
    app = VaultApp(MemoryStore(), pro_manager_factory=lambda uid: pro_manager(db, uid), scheduler=immediate)
    press_all(app, "1234=")
    assert app.current_user.is_pro
    assert app.manager.stats.is_unlimited
    raw = make_image(1600, 1200)
    res = asyncio.run(app.manager.upload([BytesUpload("p.png", raw, "image/png")]))
    stored = res.records[0]
    assert stored.id.isdigit()
    assert stored.size == len(raw)


def test_pro_code_uses_the_database_by_default(db):
    app = VaultApp(MemoryStore(), scheduler=immediate)
    press_all(app, "1234=")
    assert app.view == View.FILE_MANAGER
    assert app.manager.stats.is_unlimited
    asyncio.run(app.manager.upload([BytesUpload("n.txt", b"note", "text/plain")]))
    assert [f.name for f in list_files(db, 1)] == ["n.txt"]
    app.back_to_calculator()
    assert app.manager is None


def test_unreadable_vault_is_reported_and_calculator_stays():
    kv = MemoryStore()
    kv.set(key_for(2), "{not json")
    notes = []
    app = VaultApp(kv, scheduler=immediate, notify=notes.append)
    press_all(app, "7360=")
    assert app.view == View.CALCULATOR
    assert app.current_user is None and app.manager is None
    assert len(notes) == 1 and isinstance(notes[0], PersistenceFailure)
    app.press("C")


def test_unlock_with_default_scheduler_and_no_event_loop():
    app = VaultApp(MemoryStore(), delay=0.01)
    press_all(app, "7360=")
    assert app.view == View.FILE_MANAGER
    assert app.current_user.user_id == 2


def test_unlock_with_default_scheduler_inside_event_loop():
    async def scenario():
        app = VaultApp(MemoryStore(), delay=0.01)
        press_all(app, "4567=")
        assert app.view == View.CALCULATOR
        await asyncio.sleep(0.05)
        return app

    app = asyncio.run(scenario())
    assert app.view == View.FILE_MANAGER
    assert app.manager.user_id == 3


def test_different_codes_bind_different_identities():
    app = VaultApp(MemoryStore(), scheduler=immediate)
    press_all(app, "7360=")
    first = app.current_user
    app.back_to_calculator()
    assert app.view == View.CALCULATOR and app.calculator.display == "0"
    press_all(app, "4567=")
    assert app.current_user != first
    assert app.manager.user_id == 3


def test_calculator_is_hidden_while_vault_is_open():
    app = VaultApp(MemoryStore(), scheduler=immediate)
    press_all(app, "4567=")
    with pytest.raises(RuntimeError):
        app.press("1")


def test_ordinary_math_stays_on_calculator():
    app = VaultApp(MemoryStore(), scheduler=immediate)
    press_all(app, "12+30=")
    assert app.view == View.CALCULATOR
    assert app.calculator.display == "42"


def test_pin_setup_flow(db):
    app = VaultApp(MemoryStore(), scheduler=immediate)
    app.setup_new_pin()
    assert app.view == View.PIN_SETUP
    with pytest.raises(ValueError, match="PINs do not match"):
        app.submit_pin_setup(db, "5555", "5556", "What is your favorite color?", "blue")
    with pytest.raises(ValueError, match="4 digits"):
        app.submit_pin_setup(db, "55a5", "55a5", "q", "a")
    with pytest.raises(ValueError, match="required"):
        app.submit_pin_setup(db, "5555", "5555", "", "")
    who = app.submit_pin_setup(db, "5555", "5555", "What is your favorite color?", "blue")
    assert who.tier == "free"
    assert app.view == View.CALCULATOR
