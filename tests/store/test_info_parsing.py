from setexport.core.typing import PartitionId
from setexport.store.aerospike import parse_info_pairs, parse_sets_info


def test_parse_sets_info_with_request_echo():
    response = (
        "sets\tns=test:set=demo:objects=3:tombstones=0;"
        "ns=test:set=users:objects=10;ns=bar:set=events:objects=0;\n"
    )
    assert parse_sets_info(response) == [
        PartitionId("test", "demo"),
        PartitionId("test", "users"),
        PartitionId("bar", "events"),
    ]


def test_parse_sets_info_skips_incomplete_entries():
    assert parse_sets_info("") == []
    assert parse_sets_info("ns=test:objects=1;set=orphan;") == []


def test_parse_info_pairs():
    cfg = parse_info_pairs("namespace/test\tstorage-engine=device;data-in-memory=false;rf=2")
    assert cfg == {"storage-engine": "device", "data-in-memory": "false", "rf": "2"}
