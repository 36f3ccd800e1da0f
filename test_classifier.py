#!/usr/bin/env python3
"""
Unit tests for member classification and collection detection.
"""

import array
import unittest
from dataclasses import dataclass, field
from typing import Annotated, Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from breeze_metadata_lib import PropertyClassifier, element_type, is_collection_type
from breeze_metadata_lib.attributes import MaxLength, Required
from breeze_metadata_lib.classifier import data_type_name, split_annotated, unwrap_optional
from sample_models import Category, Customer, Order, OrderStatus, Person


@dataclass
class Invoice:
    number: Annotated[str, Required()]
    lines: List["InvoiceLine"] = field(default_factory=list)
    total: Optional[float] = None


@dataclass
class InvoiceLine:
    invoice: Optional[Invoice]
    amount: float


class TestCollectionTypes(unittest.TestCase):
    """Tests for is_collection_type and element_type."""

    def test_collections(self):
        for tp in [List[int], list, Set[str], FrozenSet[int], Tuple[int, ...], Sequence[Order],
                   Iterable[Order], Dict[str, int], array.array, list[Order]]:
            with self.subTest(tp=tp):
                self.assertTrue(is_collection_type(tp))

    def test_scalars(self):
        for tp in [str, bytes, bytearray, int, float, Order, OrderStatus, Optional[int]]:
            with self.subTest(tp=tp):
                self.assertFalse(is_collection_type(tp))

    def test_element_type_of_parameterized_collection(self):
        self.assertIs(element_type(List[Order]), Order)
        self.assertIs(element_type(Sequence[str]), str)
        self.assertIs(element_type(Tuple[int, ...]), int)
        self.assertIs(element_type(list[Customer]), Customer)

    def test_element_type_of_untyped_collection(self):
        self.assertIs(element_type(list), object)
        self.assertIs(element_type(array.array), object)

    def test_element_type_of_scalar_is_itself(self):
        self.assertIs(element_type(int), int)
        self.assertIs(element_type(Order), Order)


class TestTypeHelpers(unittest.TestCase):
    """Tests for Annotated and Optional unwrapping."""

    def test_split_annotated(self):
        tp, metadata = split_annotated(Annotated[str, Required(), MaxLength(5)])
        self.assertIs(tp, str)
        self.assertEqual(metadata, (Required(), MaxLength(5)))
        self.assertEqual(split_annotated(int), (int, ()))

    def test_unwrap_optional(self):
        self.assertEqual(unwrap_optional(Optional[int]), (int, True))
        self.assertEqual(unwrap_optional(int | None), (int, True))
        self.assertEqual(unwrap_optional(int), (int, False))

    def test_data_type_name(self):
        self.assertEqual(data_type_name(str), "String")
        self.assertEqual(data_type_name(bool), "Boolean")
        self.assertEqual(data_type_name(OrderStatus), "OrderStatus")
        self.assertEqual(data_type_name(List[str]), "list")


class TestPropertyClassifier(unittest.TestCase):
    """Tests for PropertyClassifier."""

    def setUp(self):
        self.classifier = PropertyClassifier([Person, Customer, Order, Category])

    def classify(self, cls, name):
        members = {m.name: m for m in self.classifier.enumerate_members(cls)}
        return self.classifier.classify(members[name])

    def test_collection_navigation(self):
        orders = self.classify(Customer, "orders")
        self.assertTrue(self.classifier.is_navigation(orders))
        self.assertTrue(orders.is_collection)
        self.assertIs(orders.element_type, Order)

    def test_optional_scalar_navigation(self):
        customer = self.classify(Order, "customer")
        self.assertTrue(self.classifier.is_navigation(customer))
        self.assertFalse(customer.is_collection)
        self.assertIs(customer.element_type, Customer)
        self.assertTrue(customer.is_optional)

    def test_data_property_nullability(self):
        self.assertFalse(self.classify(Order, "placed_at").is_nullable)
        self.assertTrue(self.classify(Order, "notes").is_nullable)
        self.assertTrue(self.classify(Person, "name").is_nullable)
        self.assertFalse(self.classify(Order, "status").is_nullable)
        self.assertTrue(self.classify(Order, "previous_status").is_nullable)

    def test_annotations_collected_inside_optional(self):
        email = self.classify(Person, "email")
        self.assertIs(email.property_type, str)
        self.assertEqual(len(email.annotations), 2)

    def test_members_declared_on_base_in_set_excluded(self):
        names = [m.name for m in self.classifier.enumerate_members(Customer)]
        self.assertEqual(names, ["credit_limit", "priority", "orders"])

    def test_member_declaring_type(self):
        members = PropertyClassifier([Customer]).enumerate_members(Customer)
        declaring = {m.name: m.declaring_type for m in members}
        self.assertIs(declaring["orders"], Customer)
        self.assertIs(declaring["name"], Person)

    def test_dataclass_entities_with_forward_refs(self):
        classifier = PropertyClassifier([Invoice, InvoiceLine])
        members = {m.name: classifier.classify(m) for m in classifier.enumerate_members(Invoice)}
        self.assertEqual(list(members), ["number", "lines", "total"])
        self.assertTrue(classifier.is_navigation(members["lines"]))
        self.assertIs(members["lines"].element_type, InvoiceLine)
        self.assertFalse(classifier.is_navigation(members["total"]))
        self.assertTrue(members["total"].is_nullable)

    def test_membership_alone_decides_navigation(self):
        classifier = PropertyClassifier([Invoice])
        members = {m.name: classifier.classify(m) for m in classifier.enumerate_members(Invoice)}
        self.assertFalse(classifier.is_navigation(members["lines"]))


if __name__ == '__main__':
    unittest.main()
