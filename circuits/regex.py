"""Finite automaton for the regular expression a+b+c (or b+c) over a padded string.

Row r holds the automaton state before reading character r. The transition
lookup checks (state[r], state[r+1], char[r]) against the transition table on
every row of the string; the "fix-st" gate pins the first state to START and
the state after the padded string to DONE. Unused states are padded with
DONE and unused characters with EOF, so (DONE, DONE, EOF) transitions carry
the automaton to the end of the region.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .base import Circuit
from primitives.value import Value
from protocol.columns import Column, Selector, TableColumn
from protocol.constraint_system import ConstraintSystem
from protocol.layouter import Layouter, Region, Table

ST_I = 10
ST_A = 1
ST_B = 2
ST_C = 3
ST_DONE = 4
ST_START = ST_I

EOF = 0xFFFF

MAX_STR_LEN = 20

# (current state, next state, character); None reads EOF
TRANSITIONS: List[Tuple[int, int, Optional[str]]] = [
    (ST_I, ST_A, "a"),
    (ST_I, ST_B, "b"),
    (ST_A, ST_A, "a"),
    (ST_A, ST_B, "b"),
    (ST_B, ST_B, "b"),
    (ST_B, ST_C, "c"),
    (ST_C, ST_DONE, None),
    (ST_DONE, ST_DONE, None),
]


def char_code(ch: Optional[str]) -> int:
    return EOF if ch is None else ord(ch)


def transition_rows() -> List[Tuple[int, int, int]]:
    """Table rows, led by the all-zero row matched by disabled lookup rows."""
    return [(0, 0, 0)] + [(cur, nxt, char_code(ch)) for cur, nxt, ch in TRANSITIONS]


@dataclass
class RegexConfig:
    q_match: Selector
    q_regex: Selector
    state: Column
    char: Column
    fixed_state: Column
    table_state_current: TableColumn
    table_state_next: TableColumn
    table_char: TableColumn


class RegexCircuit(Circuit):
    """Accepts `string` with the state trace `states` (one state per consumed character, plus the last)."""

    def __init__(self, string: Optional[str] = None, states: Optional[List[int]] = None):
        if string is not None and len(string) > MAX_STR_LEN:
            raise ValueError(f"String longer than {MAX_STR_LEN} characters")
        if states is not None and len(states) > MAX_STR_LEN:
            raise ValueError(f"State trace longer than {MAX_STR_LEN} states")
        self.string = string
        self.states = states

    def without_witnesses(self) -> "RegexCircuit":
        return RegexCircuit()

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> RegexConfig:
        q_regex = meta.complex_selector()
        q_match = meta.complex_selector()
        st = meta.advice_column()
        ch = meta.advice_column()
        fix_st = meta.fixed_column()
        tbl_st_cur = meta.lookup_table_column()
        tbl_st_nxt = meta.lookup_table_column()
        tbl_ch = meta.lookup_table_column()

        meta.create_gate("fix-st", lambda vc: [
            vc.query_selector(q_match) * (vc.query_advice(st, 0) - vc.query_fixed(fix_st, 0))
        ])

        def transition(vc):
            en = vc.query_selector(q_regex)
            return [
                (en * vc.query_advice(st, 0), tbl_st_cur),
                (en * vc.query_advice(st, 1), tbl_st_nxt),
                (en * vc.query_advice(ch, 0), tbl_ch),
            ]

        meta.lookup("transition-st", transition)
        return RegexConfig(q_match, q_regex, st, ch, fix_st, tbl_st_cur, tbl_st_nxt, tbl_ch)

    def _state(self, i: int) -> Value:
        if self.states is None:
            return Value.unknown()
        return Value.known(self.states[i] if i < len(self.states) else ST_DONE)

    def _char(self, i: int) -> Value:
        if self.string is None:
            return Value.unknown()
        return Value.known(char_code(self.string[i] if i < len(self.string) else None))

    def synthesize(self, config: RegexConfig, layouter: Layouter) -> None:
        def table(t: Table) -> None:
            for offset, (cur, nxt, ch) in enumerate(transition_rows()):
                t.assign_cell(config.table_state_current, offset, cur)
                t.assign_cell(config.table_state_next, offset, nxt)
                t.assign_cell(config.table_char, offset, ch)

        layouter.assign_table("transitions", table)

        def regex(region: Region) -> None:
            region.assign_fixed(config.fixed_state, 0, ST_START)
            config.q_match.enable(region, 0)
            for i in range(MAX_STR_LEN):
                config.q_regex.enable(region, i)
                region.assign_advice(config.state, i, self._state(i))
                region.assign_advice(config.char, i, self._char(i))

            region.assign_advice(config.state, MAX_STR_LEN, ST_DONE)
            region.assign_fixed(config.fixed_state, MAX_STR_LEN, ST_DONE)
            config.q_match.enable(region, MAX_STR_LEN)

        layouter.assign_region("regex", regex)
