"""
Tests for interchange record export/import.
"""

import copy
import json

import pytest

from turing2d.core import (
    ConstructionError,
    Head,
    InvalidRecordError,
    Program,
    RuleImportError,
    export_program,
    import_program,
    restore_heads,
)


class TestExport:
    """Tests for export_program."""

    def test_layout(self, small_program):
        small_program.update(10)
        record = export_program(small_program)

        assert set(record) == {"parameters", "transitionTable", "currentHeads"}
        assert record["parameters"] == {
            "numStates": 4,
            "numSymbols": 3,
            "numHeads": 8,
            "headRadius": 0.25,
            "width": 64,
            "height": 64,
            "seed": 1234,
            "iterations": 10,
        }
        assert len(record["transitionTable"]) == 12
        assert len(record["currentHeads"]) == 8

    def test_table_order_and_names(self, small_program):
        table = export_program(small_program)["transitionTable"]
        pairs = [(r["currentState"], r["currentSymbol"]) for r in table]
        assert pairs == [(s, k) for s in range(4) for k in range(3)]
        assert {r["action"] for r in table} <= {"LEFT", "RIGHT", "UP", "DOWN"}

    def test_heads_in_order(self, small_program):
        small_program.update(3)
        heads = export_program(small_program)["currentHeads"]
        assert heads == [h.to_dict() for h in small_program.heads]

    def test_json_serializable(self, small_program):
        record = export_program(small_program)
        assert json.loads(json.dumps(record)) == record


class TestImport:
    """Tests for import_program and restore_heads."""

    def test_heads_regenerated_not_restored(self, small_program):
        small_program.update(50)
        record = export_program(small_program)

        imported = import_program(record)
        fresh = Program(4, 3, 64, 64, 8, 0.25, seed=1234)

        assert imported.table == small_program.table
        assert imported.heads == fresh.heads
        assert imported.grid == fresh.grid
        assert imported.iterations == 0

    def test_round_trip(self, small_program, use_numba):
        small_program.update(123)
        exported = export_program(small_program)

        imported = import_program(exported, use_numba=use_numba)
        restore_heads(imported, exported)

        assert export_program(imported) == exported

    def test_round_trip_through_json(self, scenario_rules):
        prog = Program(2, 2, 3, 3, 1, 0, seed=99, table=scenario_rules[:1] + scenario_rules[3:])
        prog.heads[0] = Head(0, 0, 2)
        prog.grid.clear()
        prog.update(2)

        exported = json.loads(json.dumps(export_program(prog)))
        restored = restore_heads(import_program(exported), exported)

        assert export_program(restored) == exported

    def test_numeric_actions(self, scenario_rules):
        record = {
            "parameters": {
                "numStates": 2, "numSymbols": 2, "numHeads": 1, "headRadius": 0.5,
                "width": 3, "height": 3, "seed": 1, "iterations": 0,
            },
            "transitionTable": [dict(r, action=i) for i, r in enumerate(scenario_rules)],
        }
        prog = import_program(record)
        assert [r["action"] for r in prog.table.to_list()] == ["LEFT", "RIGHT", "UP", "DOWN"]

    def test_default_head_radius(self, scenario_rules):
        record = {
            "parameters": {
                "numStates": 2, "numSymbols": 2, "numHeads": 2,
                "width": 20, "height": 20, "seed": 1, "iterations": 0,
            },
            "transitionTable": scenario_rules,
        }
        assert import_program(record).head_radius == 0.3

    def test_unknown_action(self, small_program):
        record = export_program(small_program)
        record["transitionTable"][5]["action"] = "SIDEWAYS"
        with pytest.raises(RuleImportError):
            import_program(record)

    @pytest.mark.parametrize("drop", ["parameters", "transitionTable"])
    def test_missing_block(self, small_program, drop):
        record = export_program(small_program)
        del record[drop]
        with pytest.raises(InvalidRecordError):
            import_program(record)

    def test_missing_parameter(self, small_program):
        record = export_program(small_program)
        del record["parameters"]["seed"]
        with pytest.raises(InvalidRecordError):
            import_program(record)

    def test_single_symbol_rejected(self, small_program):
        record = export_program(small_program)
        record["parameters"]["numSymbols"] = 1
        record["transitionTable"] = []
        with pytest.raises(ConstructionError):
            import_program(record)

    def test_restore_requires_heads(self, small_program):
        record = export_program(small_program)
        prog = import_program(record)
        del record["currentHeads"]
        with pytest.raises(InvalidRecordError):
            restore_heads(prog, record)

    def test_restore_head_count_mismatch(self, small_program):
        record = export_program(small_program)
        prog = import_program(record)
        bad = copy.deepcopy(record)
        bad["currentHeads"] = bad["currentHeads"][:2]
        with pytest.raises(InvalidRecordError):
            restore_heads(prog, bad)

    @pytest.mark.parametrize(
        "head",
        [
            {"state": 5, "x": -1, "y": 99},
            {"state": 0, "x": 64, "y": 0},
            {"state": 0, "x": 0, "y": 64},
            {"state": 4, "x": 0, "y": 0},
            {"state": -1, "x": 0, "y": 0},
        ],
    )
    def test_restore_rejects_out_of_range_head(self, small_program, head):
        record = export_program(small_program)
        prog = import_program(record)
        record["currentHeads"][0] = head
        with pytest.raises(InvalidRecordError):
            restore_heads(prog, record)

    def test_failed_restore_leaves_heads_untouched(self, small_program):
        record = export_program(small_program)
        prog = import_program(record)
        before = prog.heads.copy()

        bad = copy.deepcopy(record)
        bad["parameters"]["iterations"] = 77
        bad["currentHeads"][0] = {"state": 1, "x": 0, "y": 0}
        bad["currentHeads"][1] = {"state": 1, "x": 1, "y": 1}
        bad["currentHeads"][2] = {"state": 1}

        with pytest.raises(InvalidRecordError):
            restore_heads(prog, bad)
        assert prog.heads == before
        assert prog.iterations == 0

    def test_restored_program_steps(self, small_program, use_numba):
        small_program.update(40)
        record = export_program(small_program)
        prog = restore_heads(import_program(record, use_numba=use_numba), record)
        prog.update(5)
        assert prog.iterations == 45
