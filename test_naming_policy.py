#!/usr/bin/env python3
"""
Unit tests for naming policies, association names and enum collection.
"""

import json
import os
import tempfile
import unittest
from enum import Enum
from pathlib import Path
from unittest.mock import patch

from breeze_metadata_lib import (
    DefaultNamingPolicy,
    EnumCollector,
    MemberInfo,
    MetadataBuilder,
    OverrideNamingPolicy,
    PolicyConfigError,
    PolicyOverride,
    association_name,
    pluralize
)
from breeze_metadata_lib.policy_overrides import matches_pattern
import sample_models
from sample_models import ALL_TYPES, Category, Order, OrderStatus, Person


def member(name, owner=Order):
    return MemberInfo(name=name, annotation=int, declaring_type=owner)


class TestDefaultNamingPolicy(unittest.TestCase):
    """Tests for DefaultNamingPolicy."""

    def setUp(self):
        self.policy = DefaultNamingPolicy()

    def test_pluralize(self):
        cases = [
            ("Order", "Orders"),
            ("Category", "Categories"),
            ("Bus", "Buss"),  # naive suffix rule
            ("", ""),
        ]
        for name, expected in cases:
            with self.subTest(name=name):
                self.assertEqual(pluralize(name), expected)

    def test_resource_name(self):
        self.assertEqual(self.policy.resource_name(Category), "Categories")

    def test_key_generation_is_identity(self):
        self.assertEqual(self.policy.auto_generated_key_type(Order), "Identity")

    def test_key_property_by_name(self):
        self.assertTrue(self.policy.is_key_property(Order, member("EntityKey")))
        self.assertFalse(self.policy.is_key_property(Order, member("id")))

    def test_no_version_property(self):
        self.assertFalse(self.policy.is_version_property(Order, member("row_version")))


class TestAssociationName(unittest.TestCase):
    """Tests for association_name."""

    def test_both_ends_agree(self):
        self.assertEqual(association_name("Customer", "Order", ["customer"]),
                         association_name("Order", "Customer", ["customer"]))

    def test_format(self):
        self.assertEqual(association_name("Order", "Customer", ["customer"]), "FK_Customer_Order_customer")
        self.assertEqual(association_name("B", "A", ["x", "y"]), "FK_A_B_x y")

    def test_self_association(self):
        self.assertEqual(association_name("Category", "Category", ["parent"]), "FK_Category_Category_parent")


class TestEnumCollector(unittest.TestCase):
    """Tests for EnumCollector."""

    def test_collect_once(self):
        collector = EnumCollector()
        self.assertTrue(collector.collect(OrderStatus))
        self.assertFalse(collector.collect(OrderStatus))
        self.assertEqual(len(collector.enum_types), 1)
        self.assertEqual(collector.enum_types[0].values, ["PENDING", "SHIPPED", "DELIVERED"])

    def test_dedup_by_short_name(self):
        class OrderStatus(Enum):
            OTHER = 1

        collector = EnumCollector()
        collector.collect(OrderStatus)
        collector.collect(sample_models.OrderStatus)
        self.assertEqual(len(collector.enum_types), 1)
        self.assertEqual(collector.enum_types[0].values, ["OTHER"])

    def test_aliases_are_listed(self):
        class Size(Enum):
            SMALL = 1
            S = 1
            LARGE = 2

        collector = EnumCollector()
        collector.collect(Size)
        self.assertEqual(collector.enum_types[0].values, ["SMALL", "S", "LARGE"])


class TestPatternMatching(unittest.TestCase):
    """Tests for wildcard matching of type names."""

    def test_patterns(self):
        cases = [
            ("Order", "Order", True),
            ("Order", "Orders", False),
            ("Order*", "OrderLine", True),
            ("*Line", "OrderLine", True),
            ("*line", "OrderLine", True),
            ("Ord?r", "Order", True),
            ("Cat*y", "Category", True),
            ("Cat*y", "Catalog", False),
        ]
        for pattern, name, expected in cases:
            with self.subTest(pattern=pattern, name=name):
                self.assertEqual(matches_pattern(pattern, name), expected)


class TestOverrideNamingPolicy(unittest.TestCase):
    """Tests for OverrideNamingPolicy."""

    def make_policy(self):
        return OverrideNamingPolicy([
            PolicyOverride(pattern="*", priority=0, auto_generated_key_type="KeyGenerator"),
            PolicyOverride(pattern="Order", priority=10, resource_name="PurchaseOrders",
                           key_properties=["EntityKey", "placed_at"], version_properties=["row_version"]),
            PolicyOverride(pattern="Ord*", priority=5, resource_name="Ignored",
                           auto_generated_key_type="None"),
        ])

    def test_highest_priority_wins(self):
        policy = self.make_policy()
        self.assertEqual(policy.resource_name(Order), "PurchaseOrders")
        self.assertEqual(policy.auto_generated_key_type(Order), "None")

    def test_fallback_when_no_override_answers(self):
        policy = self.make_policy()
        self.assertEqual(policy.resource_name(Category), "Categories")
        self.assertEqual(policy.auto_generated_key_type(Category), "KeyGenerator")
        self.assertTrue(policy.is_key_property(Category, member("EntityKey", Category)))
        self.assertFalse(policy.is_version_property(Category, member("row_version", Category)))

    def test_key_and_version_lists(self):
        policy = self.make_policy()
        self.assertTrue(policy.is_key_property(Order, member("placed_at")))
        self.assertFalse(policy.is_key_property(Order, member("notes")))
        self.assertTrue(policy.is_version_property(Order, member("row_version")))

    def test_builder_uses_overrides(self):
        document = MetadataBuilder(policy=self.make_policy()).build(ALL_TYPES)
        order = document.get_structural_type("Order")
        self.assertEqual(order.default_resource_name, "PurchaseOrders")
        self.assertEqual(order.auto_generated_key_type, "None")
        self.assertTrue(order.get_data_property("placed_at").is_part_of_key)
        self.assertEqual(order.get_data_property("row_version").concurrency_mode, "Fixed")
        self.assertIn("PurchaseOrders", document.resource_entity_type_map)
        self.assertEqual(document.get_structural_type("Person").auto_generated_key_type, "KeyGenerator")

    def test_override_round_trip(self):
        override = PolicyOverride(pattern="Order", priority=3, resource_name="PurchaseOrders")
        self.assertEqual(PolicyOverride.from_dict(override.to_dict()), override)

    def test_invalid_key_type(self):
        with self.assertRaises(PolicyConfigError):
            PolicyOverride.from_dict({"pattern": "*", "auto_generated_key_type": "Sequence"})

    def test_missing_pattern(self):
        with self.assertRaises(PolicyConfigError):
            PolicyOverride.from_dict({"resource_name": "Things"})

    def test_field_types_are_checked(self):
        cases = [
            {"pattern": 7},
            {"pattern": "*", "priority": "high"},
            {"pattern": "*", "priority": True},
            {"pattern": "*", "resource_name": 5},
            {"pattern": "*", "key_properties": "EntityKey"},
            {"pattern": "*", "version_properties": [1]},
        ]
        for data in cases:
            with self.subTest(data=data):
                with self.assertRaises(PolicyConfigError):
                    PolicyOverride.from_dict(data)


class TestPolicyFile(unittest.TestCase):
    """Tests for loading overrides from JSON files."""

    def write_file(self, content):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            f.write(content)
        self.addCleanup(os.unlink, f.name)
        return f.name

    def test_load_from_file(self):
        path = self.write_file(json.dumps({
            "version": "1.0",
            "overrides": [{"pattern": "Person", "priority": 1, "resource_name": "People"}]
        }))
        policy = OverrideNamingPolicy()
        self.assertTrue(policy.load_from_file(path))
        self.assertEqual(policy.policy_file, path)
        self.assertEqual(policy.resource_name(Person), "People")

    def test_explicit_missing_file(self):
        with self.assertRaises(PolicyConfigError):
            OverrideNamingPolicy().load_from_file("/nonexistent/breeze_policy.json")

    def test_invalid_json(self):
        path = self.write_file("{not json")
        with self.assertRaises(PolicyConfigError):
            OverrideNamingPolicy().load_from_file(path)

    def test_default_file_absent(self):
        with tempfile.TemporaryDirectory() as tmp:
            with patch('pathlib.Path.cwd', return_value=Path(tmp)):
                policy = OverrideNamingPolicy()
                self.assertFalse(policy.load_from_file())
                self.assertIsNone(policy.policy_file)


if __name__ == '__main__':
    unittest.main()
