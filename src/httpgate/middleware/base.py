"""
=============================================================================
MIDDLEWARE CHAIN
=============================================================================

Defines the gate interface and the ordered chain that runs gates before
dispatch.

=============================================================================
GATES
=============================================================================

A gate is called with the request and the in-progress response and
answers one question: may processing continue?

    gate(request, response) -> bool

        True   → continue with the next gate (or dispatch)
        False  → STOP. The response as the gate left it is final.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         CHAIN EXECUTION                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Request ──►┌─────────┐ True ┌─────────┐ True ┌─────────┐ True     │
    │              │ Logging │─────►│  Auth   │─────►│   ...   │────► dispatch
    │              └─────────┘      └────┬────┘      └─────────┘          │
    │                                    │ False                           │
    │                                    ▼                                 │
    │                         401 {"error": "Unauthorized"}               │
    │                         (later gates and the handler never run)     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A gate that returns False owns the response: it must leave a complete
status and body behind.

Unlike a wrapping (onion) pipeline, gates only run BEFORE the handler.
There is no "after" phase, so the first gate registered is simply the
first gate run.

=============================================================================
ORDER IS A CONTRACT
=============================================================================

    chain.register(LoggingMiddleware())   # sees every request
    chain.register(AuthMiddleware())      # may stop the chain

Swap the two and rejected requests are no longer logged. Registration
order is execution order, always.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterator, List, Optional
import logging

from ..http.registry import RegistrationClosedError
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# Gate: anything callable as gate(request, response) -> bool.
Gate = Callable[[HTTPRequest, HTTPResponse], bool]


class Middleware(ABC):
    """
    Base class for class-based gates.

    =========================================================================
    THE GATE CONTRACT
    =========================================================================

        class RequireJSON(Middleware):
            def __call__(self, request, response) -> bool:
                if request.method is HTTPMethod.POST and \\
                        not request.has_header("application/json"):
                    response.set_error(400, "Expected JSON")
                    return False        # stop, response is final
                return True             # carry on

    =========================================================================
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, response: HTTPResponse) -> bool:
        """
        Inspect the request, optionally write the response.

        Returns:
            True to continue, False to stop the chain.
        """

    @property
    def name(self) -> str:
        """Name used in log messages."""
        return self.__class__.__name__


class FunctionMiddleware(Middleware):
    """
    Wraps a plain function as a named gate.

        def block_deletes(request, response):
            ...

        chain.register(FunctionMiddleware(block_deletes))
    """

    def __init__(self, func: Gate, name: Optional[str] = None):
        self._func = func
        self._name = name or getattr(func, "__name__", repr(func))

    def __call__(self, request: HTTPRequest, response: HTTPResponse) -> bool:
        return self._func(request, response)

    @property
    def name(self) -> str:
        return self._name


def function_middleware(func: Gate) -> FunctionMiddleware:
    """
    Decorator form of FunctionMiddleware.

        @function_middleware
        def no_trailing_slash(request, response):
            if len(request.path) > 1 and request.path.endswith("/"):
                response.set_error(404, "Route not found")
                return False
            return True

        chain.register(no_trailing_slash)
    """
    return FunctionMiddleware(func)


def gate_name(gate: Gate) -> str:
    """Readable name for any gate, class-based or plain callable."""
    if isinstance(gate, Middleware):
        return gate.name
    return getattr(gate, "__name__", type(gate).__name__)


class MiddlewareChain:
    """
    Ordered list of gates run before dispatch.

    Usage:
        chain = MiddlewareChain()
        chain.use(LoggingMiddleware(), AuthMiddleware())

        response = HTTPResponse()
        if chain.run(request, response):
            ...  # dispatch to a handler
        else:
            ...  # response already finalized by a gate
    """

    def __init__(self):
        self._gates: List[Gate] = []
        self._frozen = False

    def register(self, gate: Gate) -> "MiddlewareChain":
        """
        Append a gate. It will run after every gate registered before it.

        Raises:
            RegistrationClosedError: The chain has been frozen.
            TypeError: ``gate`` is not callable.
        """
        if self._frozen:
            raise RegistrationClosedError("Middleware chain is frozen; register gates before serving")
        if not callable(gate):
            raise TypeError(f"Gate must be callable, got {type(gate).__name__}")

        self._gates.append(gate)
        logger.debug(f"Added gate: {gate_name(gate)}")
        return self

    def use(self, *gates: Gate) -> "MiddlewareChain":
        """Register several gates in the given order."""
        for gate in gates:
            self.register(gate)
        return self

    def run(self, request: HTTPRequest, response: HTTPResponse) -> bool:
        """
        Run the gates in registration order.

        Returns:
            True if every gate let the request through, False as soon as
            one gate stops it. Gates after the stopping one do not run.
        """
        for gate in self._gates:
            if not gate(request, response):
                logger.debug(
                    f"{gate_name(gate)} stopped {request.method} {request.path} "
                    f"with status {int(response.status)}"
                )
                return False
        return True

    def freeze(self) -> None:
        """Close registration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._gates)

    def __iter__(self) -> Iterator[Gate]:
        return iter(self._gates)
