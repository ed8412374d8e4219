"""Unit tests for the record schema, normalization and flattening."""

import unittest

from appphoto_ai.schemas.extraction import (
    EXPORT_COLUMNS,
    RECORD_FIELDS,
    ExtractedRecord,
    display_fields,
    display_title,
    document_json_schema,
    flatten_record,
    normalize_records,
    record_json_schema,
    response_format,
)

WIRE_NAMES = [
    "nombreCompleto",
    "fechaNacimiento",
    "fechaBautismo",
    "nombrePadre",
    "nombreMadre",
    "abuelosPaternos",
    "abuelosMaternos",
]


class RecordSchemaTests(unittest.TestCase):
    def test_required_lists_exactly_the_seven_fields(self) -> None:
        schema = record_json_schema()
        self.assertEqual(schema["required"], WIRE_NAMES)
        self.assertEqual(list(schema["properties"]), WIRE_NAMES)

    def test_every_field_is_nullable(self) -> None:
        for name, prop in record_json_schema()["properties"].items():
            self.assertIn("null", prop["type"], name)

    def test_grandparents_are_string_arrays(self) -> None:
        props = record_json_schema()["properties"]
        for name in ("abuelosPaternos", "abuelosMaternos"):
            self.assertEqual(props[name]["type"], ["array", "null"])
            self.assertEqual(props[name]["items"], {"type": "string"})
        self.assertEqual(props["nombrePadre"]["type"], ["string", "null"])

    def test_document_schema_is_array_of_records(self) -> None:
        schema = document_json_schema()
        self.assertEqual(schema["type"], "array")
        self.assertEqual(schema["items"], record_json_schema())

    def test_response_format_wraps_document_schema(self) -> None:
        fmt = response_format()
        self.assertEqual(fmt["type"], "json_schema")
        self.assertIs(fmt["json_schema"]["strict"], True)
        envelope = fmt["json_schema"]["schema"]
        self.assertEqual(envelope["required"], ["records"])
        self.assertIs(envelope["additionalProperties"], False)
        self.assertIs(envelope["properties"]["records"]["items"]["additionalProperties"], False)
        self.assertEqual(envelope["properties"]["records"], document_json_schema())
        self.assertEqual(envelope["properties"]["records"]["items"]["required"], WIRE_NAMES)

    def test_field_tables_cover_the_same_keys(self) -> None:
        self.assertEqual(list(RECORD_FIELDS), WIRE_NAMES)
        self.assertEqual(list(EXPORT_COLUMNS), WIRE_NAMES)


class NormalizeRecordsTests(unittest.TestCase):
    def test_single_object_is_wrapped(self) -> None:
        person = {"nombreCompleto": "Juan Pérez", "fechaNacimiento": None}
        self.assertEqual(normalize_records(person), [person])

    def test_list_is_returned_unchanged(self) -> None:
        people = [{"nombreCompleto": "A"}, {"nombreCompleto": "B"}]
        self.assertIs(normalize_records(people), people)

    def test_empty_list_stays_empty(self) -> None:
        self.assertEqual(normalize_records([]), [])

    def test_envelope_is_unwrapped(self) -> None:
        people = [{"nombreCompleto": "A"}]
        self.assertIs(normalize_records({"records": people}), people)

    def test_envelope_holding_one_object_is_wrapped(self) -> None:
        person = {"nombreCompleto": "A"}
        self.assertEqual(normalize_records({"records": person}), [person])


class FlattenRecordTests(unittest.TestCase):
    def test_grandparents_joined_and_missing_values_blank(self) -> None:
        record = ExtractedRecord(paternal_grandparents=["A", "B"])
        row = flatten_record(record)
        self.assertEqual(row["Abuelos Paternos"], "A, B")
        for label, value in row.items():
            if label != "Abuelos Paternos":
                self.assertEqual(value, "", label)

    def test_columns_follow_export_labels(self) -> None:
        row = flatten_record(ExtractedRecord())
        self.assertEqual(list(row), list(EXPORT_COLUMNS.values()))

    def test_full_record(self) -> None:
        record = ExtractedRecord.model_validate(
            {
                "nombreCompleto": "María López",
                "fechaNacimiento": "1901-03-04",
                "fechaBautismo": "1901-03-10",
                "nombrePadre": "José López",
                "nombreMadre": "Ana Ruiz",
                "abuelosPaternos": ["Pedro López"],
                "abuelosMaternos": [],
            }
        )
        row = flatten_record(record)
        self.assertEqual(row["Nombre Completo"], "María López")
        self.assertEqual(row["Fecha de Bautismo"], "1901-03-10")
        self.assertEqual(row["Abuelos Paternos"], "Pedro López")
        self.assertEqual(row["Abuelos Maternos"], "")


class DisplayTests(unittest.TestCase):
    def test_only_populated_fields_are_shown(self) -> None:
        record = ExtractedRecord(full_name="Ana", maternal_grandparents=["X", "Y"], father_name="")
        self.assertEqual(
            display_fields(record),
            [("Full Name", "Ana"), ("Maternal Grandparents", "X, Y")],
        )

    def test_title_falls_back_to_position(self) -> None:
        self.assertEqual(display_title(ExtractedRecord(), 1), "Person 2")
        self.assertEqual(display_title(ExtractedRecord(full_name="Ana"), 0), "Ana")

    def test_unknown_keys_are_ignored(self) -> None:
        record = ExtractedRecord.model_validate({"nombreCompleto": "Ana", "parroquia": "San José"})
        self.assertEqual(record.full_name, "Ana")
        self.assertEqual(record.model_dump(by_alias=True)["nombrePadre"], None)


if __name__ == "__main__":
    unittest.main()
