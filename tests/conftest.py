"""
Pytest fixtures for cefcodec tests.
"""

from dataclasses import dataclass
from datetime import datetime

import pytest

from cefcodec.codec.timestamps import TimestampResolver
from cefcodec.core.models import CefRecord, CefSeverity, CefSignatureId


@dataclass
class Foo:
    """Payload used in the package documentation."""
    a: str
    b: int


# Sample CEF lines

@pytest.fixture
def bare_line() -> str:
    """CEF line without a transport prefix."""
    return "CEF:0|Security|threatmanager|1.0|100|worm successfully stopped|10|src=10.0.0.1 dst=2.1.2.2 spt=1232"


@pytest.fixture
def syslog_line() -> str:
    """CEF line embedded in a syslog message."""
    return "Sep 19 08:26:10 host CEF:0|Security|threatmanager|1.0|100|worm successfully stopped|10|src=10.0.0.1 dst=2.1.2.2 spt=1232"


@pytest.fixture
def sample_cef_lines() -> list[str]:
    """Assorted valid CEF lines."""
    return [
        "CEF:0|Security|threatmanager|1.0|100|worm successfully stopped|10|src=10.0.0.1 dst=2.1.2.2 spt=1232",
        "CEF:0|Fake|Product|0.1|0|Nothing|6|a=subtest b=695217",
        "<34>Dec 19 01:07:56 fw01 CEF:0|Vendor|Firewall|2.3|CVE-2021-9999|Exploit attempt|High|act=blocked msg=exploit attempt detected cnt=3",
        "CEF:1|Acme|Proxy|5|42|Request denied|Unknown|",
    ]


@pytest.fixture
def foo_record() -> CefRecord:
    """Record with a dataclass payload."""
    return CefRecord(
        version=0,
        device_vendor="Fake",
        device_product="Product",
        device_version="0.1",
        signature_id=CefSignatureId(0),
        signature="Nothing",
        severity=CefSeverity(6),
        extensions=Foo(a="subtest", b=695217),
    )


@pytest.fixture
def fixed_resolver() -> TimestampResolver:
    """Resolver whose clock is pinned to mid-2019."""
    return TimestampResolver(clock=lambda: datetime(2019, 6, 1, 12, 0, 0))
