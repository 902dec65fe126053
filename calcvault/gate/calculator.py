"""
The calculator that hides the vault.

It behaves like an ordinary four-function calculator. When "=" leaves one of
the secret codes on the display, the host is told (after a short delay, so
the result is seen first) which synthetic identity that code stands for.
Numbers use IEEE-754 floats throughout and are displayed the way a browser
prints them ("1234", "0.5", "Infinity", "NaN").
"""
import asyncio
import logging
import math
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from calcvault.shared.config import settings

logger = logging.getLogger(__name__)


class CalcState(str, Enum):
    ENTERING = "entering-first-operand"
    OPERATOR = "operator-selected"
    RESULT = "result-displayed"


@dataclass(frozen=True)
class Identity:
    user_id: int
    pin: str
    tier: str  # "free" | "pro"

    @property
    def is_pro(self) -> bool:
        return self.tier == "pro"

    def to_dict(self) -> dict:
        return {"id": self.user_id, "pin": self.pin, "subscriptionType": self.tier}


SECRET_CODES: dict[str, Identity] = {
    "1234": Identity(user_id=1, pin="1234", tier="pro"),
    "7360": Identity(user_id=2, pin="7360", tier="free"),
    "4567": Identity(user_id=3, pin="4567", tier="free"),
}

OPERATORS = {"+": "+", "-": "-", "×": "×", "*": "×", "÷": "÷", "/": "÷"}
DIGITS = set("0123456789")
CLEAR_KEYS = {"C", "c", "AC", "clear", "Clear"}

_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")


def parse_number(text: str) -> float:
    """Leading-number parse: '12.5abc' -> 12.5, 'Infinity' -> inf, junk -> nan."""
    m = _FLOAT_PREFIX.match(text)
    if not m:
        return math.nan
    return float(m.group(1).replace("Infinity", "inf"))


def format_number(value: float) -> str:
    """Shortest round-trip decimal, laid out with browser number-to-string rules."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    mantissa, _, exp = repr(abs(value)).partition("e")
    int_part, _, frac = mantissa.partition(".")
    digits = int_part + frac
    point = len(int_part) + (int(exp) if exp else 0)

    stripped = digits.lstrip("0")
    point -= len(digits) - len(stripped)
    digits = stripped.rstrip("0")
    k = len(digits)

    if k <= point <= 21:
        out = digits + "0" * (point - k)
    elif 0 < point <= 21:
        out = digits[:point] + "." + digits[point:]
    elif -6 < point <= 0:
        out = "0." + "0" * (-point) + digits
    else:
        e = point - 1
        head = digits[0] + ("." + digits[1:] if k > 1 else "")
        out = f"{head}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + out


def calculate(first: float, second: float, op: str) -> float:
    if op == "+":
        return first + second
    if op == "-":
        return first - second
    if op == "×":
        return first * second
    if op == "÷":
        if second == 0:
            if first == 0 or math.isnan(first):
                return math.nan
            return math.copysign(math.inf, first) * math.copysign(1.0, second)
        return first / second
    return second


def _default_scheduler(delay: float, fn: Callable[[], None]) -> None:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # no loop to hand the callback to: wait out the delay on this thread
        time.sleep(delay)
        fn()
        return
    loop.call_later(delay, fn)


class Calculator:
    def __init__(
        self,
        on_secret_access: Callable[[Identity], None] | None = None,
        delay: float | None = None,
        scheduler: Callable[[float, Callable[[], None]], object] | None = None,
        codes: dict[str, Identity] | None = None,
    ):
        self.on_secret_access = on_secret_access
        self.delay = settings.SECRET_DELAY if delay is None else delay
        self.scheduler = scheduler or _default_scheduler
        self.codes = SECRET_CODES if codes is None else codes
        self.clear()

    def clear(self) -> None:
        self.display = "0"
        self.previous: float | None = None
        self.operator: str | None = None
        self.state = CalcState.ENTERING

    def input_digit(self, digit: str) -> None:
        if self.state in (CalcState.OPERATOR, CalcState.RESULT):
            self.display = "0." if digit == "." else digit
            self.state = CalcState.ENTERING
            return
        if digit == ".":
            self.display += "."
            return
        self.display = digit if self.display == "0" else self.display + digit

    def input_operator(self, op: str) -> None:
        value = parse_number(self.display)
        if self.previous is None:
            self.previous = value
        elif self.operator:
            current = self.previous if self.previous and not math.isnan(self.previous) else 0.0
            result = calculate(current, value, self.operator)
            self.display = format_number(result)
            self.previous = result
        self.operator = OPERATORS[op]
        self.state = CalcState.OPERATOR

    def equals(self) -> Identity | None:
        """
        Finish the pending calculation and show the result. Returns the
        identity when the displayed result is a secret code.
        """
        if self.previous is not None and self.operator:
            result = calculate(self.previous, parse_number(self.display), self.operator)
            self.display = format_number(result)
        self.previous = None
        self.operator = None
        self.state = CalcState.RESULT

        identity = self.codes.get(self.display)
        if identity:
            logger.debug("secret code entered for user %s", identity.user_id)
            if self.on_secret_access:
                callback = self.on_secret_access
                self.scheduler(self.delay, lambda: callback(identity))
        return identity

    def press(self, key: str) -> Identity | None:
        if key in DIGITS or key == ".":
            self.input_digit(key)
        elif key in OPERATORS:
            self.input_operator(key)
        elif key == "=":
            return self.equals()
        elif key in CLEAR_KEYS:
            self.clear()
        else:
            raise ValueError(f"unknown calculator key: {key!r}")
        return None

    def press_many(self, keys) -> Identity | None:
        """Feed a key sequence; returns the last identity unlocked, if any."""
        unlocked = None
        for key in keys:
            unlocked = self.press(key) or unlocked
        return unlocked
