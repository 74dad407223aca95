"""Package greeter builds friendly greetings. It supports several styles. Use it well."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

# DEFAULT_NAME is used when no name is given.
DEFAULT_NAME = "world"

MAX_LENGTH = 80
"""Longest greeting produced."""

registry = {}

# Registered greeters by style.
registry["plain"] = None

_counter = 0


def hello(name: str = DEFAULT_NAME) -> str:
    """Hello returns a greeting. It never fails. The greeting ends with an exclamation mark."""
    return f"Hello, {name}!"


def undocumented():
    return None


@dataclass
class Greeting:
    """Greeting is a rendered greeting."""

    # Text is the greeting text.
    text: str
    count: int = 1
    """Count is how many times to repeat it."""
    # Secret is never shown.
    _secret: str = ""
    plain: bool = False


class Greeter:
    """Greeter produces greetings in a chosen style."""

    def __init__(self, style: str = "plain"):
        self.style = style

    def greet(self, name: str) -> Greeting:
        """Greet returns a Greeting for name."""
        return Greeting(text=hello(name))

    def shout(self: "Greeter", name: str) -> str:
        """Shout greets loudly."""
        return hello(name).upper()

    @classmethod
    def create(cls: type["Greeter"]) -> "Greeter":
        """Create makes a default Greeter."""
        return cls()

    @staticmethod
    def styles() -> list[str]:
        """Styles lists the supported styles."""
        return ["plain"]


class Box(Generic[T]):
    def __init__(self, item: T):
        self.item = item

    def unwrap(self: "Box[T]") -> T:
        """Unwrap returns the boxed item."""
        return self.item
