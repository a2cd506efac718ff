"""cocktaildb - cancellation-safe TheCocktailDB search client."""

__version__ = "1.0.0"

from cocktaildb.core.exceptions import (
    CancelledException,
    CocktailDBException,
    DecodeException,
    InternalException,
    TransportException,
)
from cocktaildb.engine import (
    CancelReason,
    CancellableExecutor,
    CancellationSignal,
    ErrorKind,
    Outcome,
)
from cocktaildb.client import CocktailSearchClient, RequestDescriptor, search, search_async, userip
from cocktaildb.schemas.drink_schema import Drink, Recipes

__all__ = [
    "__version__",
    "CocktailDBException",
    "CancelledException",
    "TransportException",
    "DecodeException",
    "InternalException",
    "CancelReason",
    "CancellableExecutor",
    "CancellationSignal",
    "ErrorKind",
    "Outcome",
    "CocktailSearchClient",
    "RequestDescriptor",
    "search",
    "search_async",
    "userip",
    "Drink",
    "Recipes",
]
