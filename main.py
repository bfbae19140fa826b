import sys
from dataclasses import dataclass, field
from ipaddress import IPv4Network
from typing import Optional

from rich.pretty import pprint

from argpath import *

__prog__ = "instance-create"


@dataclass
class Offer:
    size: Size = Size(0)
    commercial_type: str = "DEV1-S"


@dataclass
class Zoned:
    zone: str = "fr-par-1"


@dataclass
class CreateServerRequest:
    locality: Zoned = embedded(default_factory=Zoned)
    name: str = ""
    tags: list[str] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)
    offer: Offer = field(default_factory=Offer)
    private_network: Optional[IPv4Network] = None
    ipv6: bool = False
    replicas: Uint8 = 1


if __name__ == '__main__':
    args = sys.argv[1:]
    if verbose := "--verbose" in args:
        args.remove("--verbose")
    configure_logging(verbose=verbose)

    try:
        request = unmarshal(args, CreateServerRequest())
    except UnmarshalException as exception:
        trigger(exception, shell=True, colorful=True, fancy=True)
    pprint(request)
