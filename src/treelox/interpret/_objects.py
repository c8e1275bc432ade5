"""Object model: callables, classes and instances.

``LoxFunction`` is a closure over the environment that was current when
its declaration executed.  ``LoxClass`` holds a method table and an
optional superclass; method lookup walks the superclass chain.  Binding
a method to an instance wraps its closure in a fresh frame holding
``this``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

from treelox.constants import (
    FUNCTION_TEXT_TEMPLATE,
    INITIALIZER_NAME,
    INSTANCE_TEXT_TEMPLATE,
    NATIVE_FN_TEXT,
    THIS_NAME,
)
from treelox.model.statements import FunctionStatement
from treelox.model.tokens import Token

from ._environment import Environment
from ._values import LoxRuntimeError

if TYPE_CHECKING:
    from ._executor import Interpreter


class LoxCallable(ABC):
    """Anything a call expression may invoke."""

    @abstractmethod
    def arity(self) -> int:
        ...

    @abstractmethod
    def call(self, interpreter: Interpreter, arguments: list[object]) -> object:
        ...


class NativeFunction(LoxCallable):
    """A host function exposed in the global scope."""

    def __init__(self, name: str, arity: int, fn: Callable[..., object]) -> None:
        self.name = name
        self._arity = arity
        self._fn = fn

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: Interpreter, arguments: list[object]) -> object:
        return self._fn(*arguments)

    def __str__(self) -> str:
        return NATIVE_FN_TEXT


class LoxFunction(LoxCallable):
    """A user function or method together with its defining environment."""

    def __init__(
        self,
        declaration: FunctionStatement,
        closure: Environment,
        is_initializer: bool = False,
    ) -> None:
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: Interpreter, arguments: list[object]) -> object:
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        signal = interpreter.execute_block(self.declaration.body, environment)

        # An initializer always yields its receiver, even after a bare return.
        if self.is_initializer:
            return self.closure.get_at(0, THIS_NAME)
        if signal is not None:
            return signal.value
        return None

    def bind(self, instance: LoxInstance) -> LoxFunction:
        environment = Environment(self.closure)
        environment.define(THIS_NAME, instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def __str__(self) -> str:
        return FUNCTION_TEXT_TEMPLATE.format(name=self.name)


class LoxClass(LoxCallable):
    """A class: calling it constructs an instance."""

    def __init__(
        self,
        name: str,
        superclass: LoxClass | None,
        methods: dict[str, LoxFunction],
    ) -> None:
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> LoxFunction | None:
        klass: LoxClass | None = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method(INITIALIZER_NAME)
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter: Interpreter, arguments: list[object]) -> object:
        instance = LoxInstance(self)
        initializer = self.find_method(INITIALIZER_NAME)
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self) -> str:
        return self.name


class LoxInstance:
    """An object with a class and a free-form field map."""

    def __init__(self, klass: LoxClass) -> None:
        self.klass = klass
        self.fields: dict[str, object] = {}

    def get(self, name: Token) -> object:
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: Token, value: object) -> None:
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return INSTANCE_TEXT_TEMPLATE.format(name=self.klass.name)
