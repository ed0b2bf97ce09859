from __future__ import annotations

import unittest

from rawsql.core.case import camel_key, snake_key, to_camel, to_snake


class KeyConversionTests(unittest.TestCase):
    def test_single_key_helpers(self) -> None:
        self.assertEqual(snake_key("createdAt"), "created_at")
        self.assertEqual(snake_key("id"), "id")
        self.assertEqual(camel_key("created_at"), "createdAt")
        self.assertEqual(camel_key("id"), "id")

    def test_pascal_case_keys_keep_word_boundaries(self) -> None:
        self.assertEqual(camel_key("FirstName"), "firstName")
        self.assertEqual(camel_key("UserID"), "userID")
        self.assertEqual(
            to_camel({"FirstName": "Ada", "created_at": 1}),
            {"firstName": "Ada", "createdAt": 1},
        )

    def test_round_trip_for_camel_case_keys(self) -> None:
        samples = [
            {"id": 1},
            {"userId": 7, "firstName": "Ada", "createdAt": "2024-01-01"},
            {"isActive": True, "lastLoginAt": None},
        ]
        for mapping in samples:
            with self.subTest(mapping=mapping):
                self.assertEqual(to_camel(to_snake(mapping)), mapping)

    def test_to_snake_keeps_key_order(self) -> None:
        converted = to_snake({"zipCode": 1, "accountId": 2, "id": 3})
        self.assertEqual(list(converted), ["zip_code", "account_id", "id"])

    def test_non_recursive_leaves_nested_values_untouched(self) -> None:
        nested = {"innerKey": {"deepKey": 1}, "itemList": [{"childKey": 2}]}
        converted = to_snake({"outerKey": nested})

        self.assertEqual(list(converted), ["outer_key"])
        self.assertEqual(converted["outer_key"], nested)
        self.assertIs(converted["outer_key"], nested)

    def test_recursive_converts_nested_mappings_and_lists(self) -> None:
        converted = to_snake(
            {"outerKey": {"innerKey": 1, "itemList": [{"childKey": 2}, 3]}},
            recursive=True,
        )
        self.assertEqual(
            converted,
            {"outer_key": {"inner_key": 1, "item_list": [{"child_key": 2}, 3]}},
        )

    def test_sequence_input_is_converted_element_wise(self) -> None:
        rows = ({"user_id": 1}, {"user_id": 2, "display_name": "b"})
        converted = to_camel(rows)

        self.assertIsInstance(converted, list)
        self.assertEqual(converted, [{"userId": 1}, {"userId": 2, "displayName": "b"}])
        self.assertEqual(to_camel([]), [])

    def test_values_and_non_string_keys_pass_through(self) -> None:
        value = object()
        converted = to_camel({"some_key": value, 3: "three"})
        self.assertIs(converted["someKey"], value)
        self.assertEqual(converted[3], "three")

    def test_invalid_inputs_raise_type_error(self) -> None:
        for bad in ("userId", b"raw", 12, None, {1, 2}):
            with self.subTest(bad=bad):
                with self.assertRaises(TypeError):
                    to_snake(bad)
        with self.assertRaises(TypeError):
            to_camel([{"a_b": 1}, "not a mapping"])

    def test_colliding_keys_raise_value_error(self) -> None:
        with self.assertRaises(ValueError):
            to_snake({"userId": 1, "user_id": 2})
        with self.assertRaises(ValueError):
            to_camel({"user_id": 1, "userId": 2})


if __name__ == "__main__":
    unittest.main()
