"""
Transition rules for the 2D multi-head Turing machine.

A rule maps the pair (current state, symbol under the head) to
    (new state, symbol to write, move action)

The table is dense: every (state, symbol) pair has exactly one rule.
Rules are stored in a flat array whose row index is

    num_states * symbol + state

which is the layout both the stepper and the export enumeration rely on.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Union
import logging

import numpy as np

from .errors import ConstructionError, RuleImportError
from .prng import PseudoRandomStream

logger = logging.getLogger(__name__)


class Action(IntEnum):
    """
    Head movement after a write.

    The ordinal values are part of the interchange format (numeric
    actions) and of procedural generation (floor(next() * 4)).
    """
    LEFT = 0
    RIGHT = 1
    UP = 2
    DOWN = 3

    @classmethod
    def parse(cls, value: Union[str, int, "Action"]) -> "Action":
        """
        Resolve an action given as a name or a numeric code.

        Raises:
            RuleImportError: if the value names no known action
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value]
            except KeyError:
                raise RuleImportError(f"Unknown action name: {value!r}") from None
        if isinstance(value, bool):
            raise RuleImportError(f"Unknown action code: {value!r}")
        if isinstance(value, (int, np.integer)) or (
            isinstance(value, float) and value.is_integer()
        ):
            try:
                return cls(int(value))
            except ValueError:
                raise RuleImportError(f"Action code out of range: {value!r}") from None
        raise RuleImportError(f"Cannot interpret action: {value!r}")


@dataclass(frozen=True)
class TransitionRule:
    """(current_state, current_symbol) -> (new_state, new_symbol, action)."""
    current_state: int
    current_symbol: int
    new_state: int
    new_symbol: int
    action: Action

    def to_dict(self) -> Dict[str, Any]:
        """Interchange form with the action written by name."""
        return {
            "currentState": self.current_state,
            "currentSymbol": self.current_symbol,
            "newState": self.new_state,
            "newSymbol": self.new_symbol,
            "action": self.action.name,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "TransitionRule":
        """Parse an interchange rule; the action is resolved here and only here."""
        try:
            return cls(
                current_state=int(d["currentState"]),
                current_symbol=int(d["currentSymbol"]),
                new_state=int(d["newState"]),
                new_symbol=int(d["newSymbol"]),
                action=Action.parse(d["action"]),
            )
        except KeyError as e:
            raise RuleImportError(f"Rule is missing field {e.args[0]!r}: {dict(d)}") from None
        except (TypeError, ValueError) as e:
            if isinstance(e, RuleImportError):
                raise
            raise RuleImportError(f"Malformed rule {dict(d)}: {e}") from None


RuleLike = Union[TransitionRule, Mapping[str, Any]]


class TransitionTable:
    """
    Dense transition table stored as an int64 array of shape (S*K, 3).

    Columns are (new_state, new_symbol, action). Use the two constructors:

        table = TransitionTable.generate(6, 6, PseudoRandomStream(seed))
        table = TransitionTable.from_rules(2, 2, record["transitionTable"])
    """

    NEW_STATE = 0
    NEW_SYMBOL = 1
    ACTION = 2

    def __init__(self, num_states: int, num_symbols: int, entries: np.ndarray | None = None):
        self.num_states = int(num_states)
        self.num_symbols = int(num_symbols)
        size = self.num_states * self.num_symbols

        if entries is None:
            # Unspecified entries read as (0, 0, LEFT)
            self._entries = np.zeros((size, 3), dtype=np.int64)
        else:
            entries = np.asarray(entries, dtype=np.int64)
            if entries.shape != (size, 3):
                raise ValueError(
                    f"Table entries must have shape ({size}, 3), got {entries.shape}"
                )
            self._entries = entries.copy()

    @classmethod
    def generate(
        cls,
        num_states: int,
        num_symbols: int,
        stream: PseudoRandomStream,
    ) -> "TransitionTable":
        """
        Procedurally generate a table from a seeded stream.

        Draw order per (state, symbol), state outer and symbol inner:
        new_state, new_symbol, action. Reading the blank symbol always
        writes a non-blank one so the machine cannot settle on an
        all-blank fixed point.

        Raises:
            ConstructionError: if num_symbols < 2
        """
        if num_symbols < 2:
            raise ConstructionError(f"num_symbols must be >= 2, got {num_symbols}")

        table = cls(num_states, num_symbols)
        entries = table._entries

        for state in range(num_states):
            for symbol in range(num_symbols):
                new_state = stream.next_int(num_states)
                if symbol == 0:
                    new_symbol = 1 + stream.next_int(num_symbols - 1)
                else:
                    new_symbol = stream.next_int(num_symbols)
                action = stream.next_int(4)

                row = table.index(state, symbol)
                entries[row, cls.NEW_STATE] = new_state
                entries[row, cls.NEW_SYMBOL] = new_symbol
                entries[row, cls.ACTION] = action

        logger.debug(f"Generated {len(table)} rules ({num_states} states, {num_symbols} symbols)")
        return table

    @classmethod
    def from_rules(
        cls,
        num_states: int,
        num_symbols: int,
        rules: Iterable[RuleLike],
    ) -> "TransitionTable":
        """
        Build a table from an explicit rule list.

        Later rules for the same (state, symbol) overwrite earlier ones.
        A new_symbol >= num_symbols is accepted and clamped to blank when
        the rule fires.

        Raises:
            RuleImportError: unknown action, or a rule that would index
                outside the table or grid
        """
        table = cls(num_states, num_symbols)
        count = 0

        for raw in rules:
            rule = raw if isinstance(raw, TransitionRule) else TransitionRule.from_dict(raw)
            table._check_importable(rule)
            table.set_rule(rule)
            count += 1

        logger.debug(f"Imported {count} rules into {len(table)}-entry table")
        return table

    def _check_importable(self, rule: TransitionRule) -> None:
        if not 0 <= rule.current_state < self.num_states:
            raise RuleImportError(
                f"currentState {rule.current_state} outside [0, {self.num_states})"
            )
        if not 0 <= rule.current_symbol < self.num_symbols:
            raise RuleImportError(
                f"currentSymbol {rule.current_symbol} outside [0, {self.num_symbols})"
            )
        if not 0 <= rule.new_state < self.num_states:
            raise RuleImportError(
                f"newState {rule.new_state} outside [0, {self.num_states})"
            )
        if rule.new_symbol < 0:
            raise RuleImportError(f"newSymbol must be non-negative, got {rule.new_symbol}")

    def index(self, state: int, symbol: int) -> int:
        """Flat row index of (state, symbol)."""
        return self.num_states * symbol + state

    @property
    def entries(self) -> np.ndarray:
        """Raw (S*K, 3) entry array. Mutating it mutates the table."""
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransitionTable):
            return NotImplemented
        return (
            self.num_states == other.num_states
            and self.num_symbols == other.num_symbols
            and np.array_equal(self._entries, other._entries)
        )

    def lookup(self, state: int, symbol: int) -> TransitionRule:
        """Rule fired when a head in `state` reads `symbol`."""
        new_state, new_symbol, action = self._entries[self.index(state, symbol)]
        return TransitionRule(
            current_state=int(state),
            current_symbol=int(symbol),
            new_state=int(new_state),
            new_symbol=int(new_symbol),
            action=Action(int(action)),
        )

    def set_rule(self, rule: TransitionRule) -> None:
        row = self.index(rule.current_state, rule.current_symbol)
        self._entries[row] = (rule.new_state, rule.new_symbol, int(rule.action))

    def rules(self) -> Iterator[TransitionRule]:
        """All rules, state outer and symbol inner (export order)."""
        for state in range(self.num_states):
            for symbol in range(self.num_symbols):
                yield self.lookup(state, symbol)

    def to_list(self) -> List[Dict[str, Any]]:
        """Interchange rule list in export order."""
        return [rule.to_dict() for rule in self.rules()]

    def display_rows(self) -> List[Dict[str, Any]]:
        """Rows for a tabular view: state, symbol, newState, newSymbol, action."""
        return [
            {
                "state": rule.current_state,
                "symbol": rule.current_symbol,
                "newState": rule.new_state,
                "newSymbol": rule.new_symbol,
                "action": rule.action.name,
            }
            for rule in self.rules()
        ]

    def copy(self) -> "TransitionTable":
        return TransitionTable(self.num_states, self.num_symbols, self._entries)

    def __repr__(self) -> str:
        return f"TransitionTable(num_states={self.num_states}, num_symbols={self.num_symbols})"
