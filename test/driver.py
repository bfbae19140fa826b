# python
"""
Driver behavioral tests: unmarshal() end to end.

Scope
- Validate the destination kinds: dataclass instances, mutable mappings, RawArgs.
- Validate argument-name checks (grammar, resource ids, duplicates).
- Validate path resolution through lists, mappings, nested/embedded/optional records.
- Validate the ArgumentError wrapper (name, value, position, error) and the
  stop-at-first-failure behavior.

Conventions
- Test method names follow CamelCase per project convention.
- Dataclasses live at module level so their annotations resolve.
"""

import unittest
from dataclasses import dataclass, field
from ipaddress import IPv4Network
from typing import Optional
from unittest import TestCase

from argpath import (
    ArgumentError,
    CannotUnmarshalError,
    DuplicateArgumentNameError,
    FaultCode,
    InvalidArgumentNameError,
    InvalidDestinationError,
    InvalidIndexError,
    MissingFieldError,
    MissingIndexError,
    MissingIntermediateIndicesError,
    MissingMapKeyError,
    NestedFieldOnTerminalError,
    RawArgs,
    Size,
    Uint8,
    UnknownArgumentNameError,
    UnknownFieldError,
    UnmarshalableTypeError,
    embedded,
    global_registry,
    unmarshal,
)


class Version:
    def __init__(self):
        self.major = self.minor = 0

    def __unmarshal_args__(self, value, /):
        major, _, minor = value.partition(".")
        self.major, self.minor = int(major), int(minor or 0)


@dataclass
class Offer:
    size: Size = Size(0)
    commercial_type: str = ""


@dataclass
class RegionalOffer(Offer):
    region: str = ""


@dataclass
class Request:
    name: str = ""
    tags: list[str] = field(default_factory=list)
    labels: dict[str, int] = field(default_factory=dict)
    offer: Offer = field(default_factory=Offer)
    volumes: list[Offer] = field(default_factory=list)
    flag: bool = False
    count: Uint8 = 0
    ratio: float = 0.0
    organization_id: str = ""
    class_: str = ""
    private_network: Optional[IPv4Network] = None
    version: Version = field(default_factory=Version)
    parent: Optional["Request"] = None
    blob: bytes = b""


@dataclass
class First:
    zone: str = ""
    region: str = ""


@dataclass
class Second:
    zone: str = ""


@dataclass
class Extra:
    note: str = ""


@dataclass
class Shadowed:
    first: First = embedded(default_factory=First)
    second: Second = embedded(default_factory=Second)
    extra: Optional[Extra] = embedded(default=None)
    name: str = ""


@dataclass
class DirectFirst:
    inner: Second = embedded(default_factory=Second)
    zone: str = ""


@dataclass
class SizedZone:
    zone: Size = Size(0)


@dataclass
class Conflicting:
    first: First = embedded(default_factory=First)
    sized: SizedZone = embedded(default_factory=SizedZone)


@dataclass
class Node:
    name: str
    child: "Node"


@dataclass
class Holder:
    node: Optional[Node] = None


class UnmarshalTestCase(TestCase):
    def assertArgumentError(self, args, data, cause):
        with self.assertRaises(ArgumentError) as context:
            unmarshal(args, data)
        self.assertIsInstance(context.exception.error, cause)
        return context.exception


class TestDestinations(UnmarshalTestCase):
    def testReturnsTheDestination(self):
        request = Request()
        self.assertIs(unmarshal(["name=foo"], request), request)

    def testEmptyArguments(self):
        request = unmarshal([], Request())
        self.assertEqual((request.name, request.tags, request.labels), ("", [], {}))
        self.assertIsNone(request.parent)

    def testMappingDestination(self):
        self.assertEqual(unmarshal(["a=1", "b"], {}), {"a": "1", "b": ""})

    def testTypedMappingDestination(self):
        data = unmarshal(["a=1", "b=0x10"], {}, annotation=dict[str, int])
        self.assertEqual(data, {"a": 1, "b": 16})

    def testRawArgs(self):
        raw = RawArgs(["stale"])
        self.assertIs(unmarshal(["--weird", "a=b", "a=b"], raw), raw)
        self.assertEqual(raw, ["--weird", "a=b", "a=b"])

    def testInvalidDestinations(self):
        for data in (Request, 42, "name", ["a"], None):
            with self.subTest(data=data):
                with self.assertRaises(InvalidDestinationError):
                    unmarshal(["name=x"], data)

    def testBareStringRejected(self):
        with self.assertRaises(TypeError):
            unmarshal("name=foo", Request())


class TestNames(UnmarshalTestCase):
    def testInvalidName(self):
        error = self.assertArgumentError(["bad_name=1"], Request(), InvalidArgumentNameError)
        self.assertEqual(error.name, "bad_name")
        self.assertEqual(error.code, FaultCode.INVALID_ARGUMENT_NAME)

    def testUuidWhereNameExpected(self):
        self.assertArgumentError(["11111111-2222-3333-4444-555555555555"], Request(), UnknownArgumentNameError)

    def testUuidStartingWithLetter(self):
        error = self.assertArgumentError(["abcdef01-2222-3333-4444-555555555555"], Request(), UnknownArgumentNameError)
        self.assertIsInstance(error.error.__cause__, UnknownFieldError)

    def testDuplicate(self):
        self.assertArgumentError(["name=a", "name=a"], Request(), DuplicateArgumentNameError)

    def testDuplicateIgnoresCase(self):
        self.assertArgumentError(["name=a", "NAME=b"], Request(), DuplicateArgumentNameError)

    def testMapKeysKeepTheirCase(self):
        request = unmarshal(["labels.Env=1", "labels.env=2"], Request())
        self.assertEqual(request.labels, {"Env": 1, "env": 2})
        self.assertArgumentError(["labels.env=1", "LABELS.env=2"], Request(), DuplicateArgumentNameError)

    def testDuplicateIndices(self):
        self.assertArgumentError(["tags.0=a", "tags.00=b"], Request(), DuplicateArgumentNameError)

    def testEmbeddedFieldsShareTheirTarget(self):
        self.assertArgumentError(["zone=a", "Zone=b"], Shadowed(), DuplicateArgumentNameError)

    def testNamesAreCaseInsensitive(self):
        request = unmarshal(["Name=foo", "OFFER.SIZE=1G"], Request())
        self.assertEqual(request.name, "foo")
        self.assertEqual(request.offer.size, 10 ** 9)

    def testHyphenatedAndKeywordNames(self):
        request = unmarshal(["organization-id=org", "class=gp"], Request())
        self.assertEqual(request.organization_id, "org")
        self.assertEqual(request.class_, "gp")

    def testUnknownField(self):
        error = self.assertArgumentError(["nope=1"], Request(), UnknownFieldError)
        self.assertEqual(error.error.field, "nope")


class TestScalars(UnmarshalTestCase):
    def testConvertedValues(self):
        request = unmarshal(["count=42", "ratio=0.5", "name=srv"], Request())
        self.assertEqual(request.count, 42)
        self.assertEqual(str(request.count), "42")
        self.assertEqual(request.ratio, 0.5)
        self.assertEqual(request.name, "srv")

    def testBooleans(self):
        self.assertIs(unmarshal(["flag"], Request()).flag, True)
        self.assertIs(unmarshal(["flag="], Request()).flag, True)
        self.assertIs(unmarshal(["flag=true"], Request()).flag, True)
        self.assertIs(unmarshal(["flag=false"], Request(flag=True)).flag, False)
        self.assertArgumentError(["flag=TRUE"], Request(), CannotUnmarshalError)

    def testWidthOverflow(self):
        error = self.assertArgumentError(["count=300"], Request(), CannotUnmarshalError)
        self.assertIn("out of range", error.message)

    def testNestedFieldOnTerminal(self):
        self.assertArgumentError(["offer.size.sub=v"], Request(), NestedFieldOnTerminalError)
        self.assertEqual(unmarshal(["offer.size=10G"], Request()).offer.size, 10 * 10 ** 9)

    def testSelfDecodingMember(self):
        request = Request()
        version = request.version
        unmarshal(["version=2.7"], request)
        self.assertIs(request.version, version)
        self.assertEqual((version.major, version.minor), (2, 7))

    def testOptionalTerminal(self):
        request = unmarshal(["private-network=10.0.0.7/24"], Request())
        self.assertEqual(request.private_network, IPv4Network("10.0.0.0/24"))

    def testUnsupportedType(self):
        self.assertArgumentError(["blob=x"], Request(), UnmarshalableTypeError)


class TestPaths(UnmarshalTestCase):
    def testCompleteRequest(self):
        request = unmarshal(["name=foo", "tags.0=prod", "tags.1=blue", "offer.size=10G"], Request())
        self.assertEqual(request.name, "foo")
        self.assertEqual(request.tags, ["prod", "blue"])
        self.assertEqual(request.offer.size, 10 * 10 ** 9)

    def testListsGrowInOrder(self):
        self.assertEqual(unmarshal(["tags.0=x"], Request()).tags, ["x"])
        self.assertEqual(unmarshal(["tags.0=x", "tags.1=y"], Request()).tags, ["x", "y"])
        error = self.assertArgumentError(["tags.1=x"], Request(), MissingIntermediateIndicesError)
        self.assertEqual(error.value, "x")

    def testExistingItemsAreOverwritten(self):
        self.assertEqual(unmarshal(["tags.0=z"], Request(tags=["a", "b"])).tags, ["z", "b"])

    def testListErrors(self):
        self.assertArgumentError(["tags=x"], Request(), MissingIndexError)
        self.assertArgumentError(["tags.first=x"], Request(), InvalidIndexError)

    def testIndexBeyondUnsignedRange(self):
        self.assertArgumentError(["tags.99999999999999999999999=x"], Request(), InvalidIndexError)

    def testSelfReferencingRecord(self):
        self.assertArgumentError(["node.name=x"], Holder(), UnmarshalableTypeError)

    def testListOfRecords(self):
        request = unmarshal(["volumes.0.size=20G", "volumes.0.commercial-type=b_ssd"], Request())
        self.assertEqual(request.volumes, [Offer(Size(20 * 10 ** 9), "b_ssd")])

    def testFailedItemLeavesNoTrace(self):
        request = Request()
        self.assertArgumentError(["volumes.0.size=20"], request, CannotUnmarshalError)
        self.assertEqual(request.volumes, [])

    def testMappings(self):
        request = unmarshal(["labels.k=1", "labels.Other-Key=2"], Request())
        self.assertEqual(request.labels, {"k": 1, "Other-Key": 2})
        self.assertArgumentError(["labels=1"], Request(), MissingMapKeyError)

    def testMissingField(self):
        self.assertArgumentError(["offer=x"], Request(), MissingFieldError)

    def testRuntimeSubclassMembers(self):
        request = unmarshal(["offer.region=par"], Request(offer=RegionalOffer()))
        self.assertEqual(request.offer.region, "par")

    def testRecursiveOptionalRecord(self):
        request = unmarshal(["parent.name=root", "parent.tags.0=x"], Request())
        self.assertEqual(request.parent.name, "root")
        self.assertEqual(request.parent.tags, ["x"])
        self.assertIsNone(request.parent.parent)


class TestEmbedded(UnmarshalTestCase):
    def testLastEmbeddedMemberWins(self):
        shadowed = unmarshal(["zone=a", "region=b"], Shadowed())
        self.assertEqual(shadowed.second.zone, "a")
        self.assertEqual(shadowed.first.zone, "")
        self.assertEqual(shadowed.first.region, "b")

    def testOptionalEmbeddedMemberIsCreatedOnDemand(self):
        shadowed = unmarshal(["note=hello"], Shadowed())
        self.assertEqual(shadowed.extra, Extra("hello"))

    def testOptionalEmbeddedMemberStaysEmptyOnMiss(self):
        shadowed = unmarshal(["region=b"], Shadowed())
        self.assertIsNone(shadowed.extra)

    def testDirectMembersComeFirst(self):
        direct = unmarshal(["zone=a"], DirectFirst())
        self.assertEqual(direct.zone, "a")
        self.assertEqual(direct.inner.zone, "")

    def testUnknownAcrossEmbeddedMembers(self):
        self.assertArgumentError(["nope=1"], Shadowed(), UnknownFieldError)

    def testDecodingFailureEndsTheEmbeddedSearch(self):
        conflicting = Conflicting()
        self.assertArgumentError(["zone=5"], conflicting, CannotUnmarshalError)
        self.assertEqual(conflicting.first.zone, "")
        self.assertEqual(conflicting.sized.zone, 0)


class TestArgumentError(UnmarshalTestCase):
    def testWrapperCarriesContext(self):
        error = self.assertArgumentError(["name=ok", "count=x"], Request(), CannotUnmarshalError)
        self.assertEqual(error.name, "count")
        self.assertEqual(error.value, "x")
        self.assertEqual(error.position, 2)
        self.assertIs(error.__cause__, error.error)
        self.assertEqual(error.code, FaultCode.CANNOT_UNMARSHAL_VALUE)
        self.assertEqual(error.title, "invalid value")
        self.assertTrue(error.message.startswith("invalid argument 'count': "))

    def testStopsAtFirstFailure(self):
        request = Request()
        self.assertArgumentError(["name=a", "count=300", "flag=true"], request, CannotUnmarshalError)
        self.assertIs(request.flag, False)


class TestRegistries(UnmarshalTestCase):
    def testPrivateRegistryOverride(self):
        registry = global_registry.copy()
        registry.register(Size, lambda value: Size(int(value)))
        request = unmarshal(["offer.size=5"], Request(), registry=registry)
        self.assertEqual(request.offer.size, 5)
        self.assertArgumentError(["offer.size=5"], Request(), CannotUnmarshalError)


class TestLogging(TestCase):
    def testArgumentsAreLogged(self):
        with self.assertLogs("argpath", level="DEBUG") as logs:
            unmarshal(["name=foo"], Request())
        self.assertTrue(any("'name'" in line for line in logs.output))


if __name__ == '__main__':
    unittest.main()
