from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from focusbadger.errors import OperationError, ValidationError
from focusbadger.ops import (
    AddTask,
    OperationKind,
    RenameProject,
    UNSET,
    load_operation_batch,
    parse_operations,
    unwrap_batch,
    validate_operation_batch,
)


class TestOperationEnvelopeContract(unittest.TestCase):
    def test_decodes_tagged_operations(self) -> None:
        ops = parse_operations(
            {
                "operations": [
                    {"rename_project": {"data": {"from": "A", "to": "B"}}},
                    {"add_task": {"data": {"title": "T", "effort": 2}}},
                ]
            }
        )
        self.assertEqual([op.kind for op in ops], [OperationKind.RENAME_PROJECT, OperationKind.ADD_TASK])
        self.assertEqual(ops[0].payload, RenameProject(source="A", target="B"))
        self.assertIsInstance(ops[1].payload, AddTask)
        self.assertEqual(ops[1].payload.fields, {"effort": 2})
        self.assertEqual(ops[1].position, 2)

    def test_absent_keys_are_unset_not_none(self) -> None:
        (op,) = parse_operations({"operations": [{"mark_complete": {"data": {"id": "x"}}}]})
        self.assertIs(op.payload.completed_at, UNSET)

    def test_missing_operations_array(self) -> None:
        for payload in ({}, {"operations": {}}, [], None):
            with self.assertRaises(ValidationError) as ctx:
                parse_operations(payload)
            self.assertEqual(str(ctx.exception), "Operations payload must include an operations array.")

    def test_envelope_errors_carry_position_and_type(self) -> None:
        cases = [
            ("nope", "Operation 1: Each operation must be an object with a single key."),
            ({"a": {"data": {}}, "b": {"data": {}}}, "Operation 1: Each operation must contain exactly one operation key."),
            ({"add_task": []}, "Operation 1 (add_task): Operation configuration must be an object."),
            ({"add_task": {}}, "Operation 1 (add_task): Operation must include a data object."),
            ({"delete_task": {"data": {}}}, "Operation 1 (delete_task): is not a supported operation."),
        ]
        for raw, message in cases:
            with self.assertRaises(OperationError) as ctx:
                parse_operations({"operations": [raw]})
            self.assertEqual(str(ctx.exception), message)

    def test_validate_collects_every_problem(self) -> None:
        errs = validate_operation_batch(
            {
                "operations": [
                    {"add_project": {"data": {"name": "ok"}}},
                    {"explode": {"data": {}}},
                    {"add_task": {}},
                ]
            }
        )
        self.assertEqual(len(errs), 2)
        self.assertTrue(errs[0].startswith("Operation 2 (explode)"))
        self.assertTrue(errs[1].startswith("Operation 3 (add_task)"))
        self.assertEqual(validate_operation_batch({"operations": []}), [])

    def test_validate_checks_large_batches_to_the_end(self) -> None:
        ops = [{"add_project": {"data": {"name": f"p{i}"}}} for i in range(6000)]
        ops.append({"explode": {"data": {}}})
        errs = validate_operation_batch({"operations": ops})
        self.assertEqual(errs, ["Operation 6001 (explode): is not a supported operation."])


class TestOperationBatchIoContract(unittest.TestCase):
    def test_unwrap_single_element_array(self) -> None:
        batch = {"operations": []}
        self.assertIs(unwrap_batch([batch]), batch)
        with self.assertRaises(ValidationError):
            unwrap_batch([batch, batch])

    def test_load_operation_batch(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "batch.json"
            p.write_text('{"operations":[{"add_project":{"data":{"name":"X"}}}]}', encoding="utf-8")
            self.assertEqual(load_operation_batch(p)["operations"][0]["add_project"]["data"]["name"], "X")

            bad = Path(td) / "bad.json"
            bad.write_text("{oops", encoding="utf-8")
            with self.assertRaises(ValidationError):
                load_operation_batch(bad)


if __name__ == "__main__":
    unittest.main(verbosity=2)
