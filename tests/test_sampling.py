#=============================================================================
# File        : tests/test_sampling.py
# Project     : SlabTrend v1.0
# Component   : Sampling Test Suite
# Description : /proc/slabinfo parsing, provider errors and ordering
# Author      : Kyle Clouthier
# Version     : 1.0.0
# Created     : 2025-09-02
#=============================================================================

import sys
from pathlib import Path

import pytest

# Add slabtrend to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent))

from slabtrend.errors import CollectionFailure
from slabtrend.sampling import (
    ProcSlabInfoProvider, SelfMemoryTracker, SlabInfoProvider, SlabSample,
    parse_slabinfo, sort_samples
)

SLABINFO_TEXT = """\
slabinfo - version: 2.1
# name            <active_objs> <num_objs> <objsize> <objperslab> <pagesperslab> : tunables <limit> <batchcount> <sharedfactor> : slabdata <active_slabs> <num_slabs> <sharedavail>
kmalloc-64         12288  12288     64   64    1 : tunables    0    0    0 : slabdata    192    192      0
dentry             40215  41118    192   21    1 : tunables    0    0    0 : slabdata   1958   1958      0
buffer_head          780    780    104   39    1 : tunables    0    0    0 : slabdata     20     20      0
"""


def test_parse_slabinfo():
    samples = parse_slabinfo(SLABINFO_TEXT)
    assert [s.name for s in samples] == ["kmalloc-64", "dentry", "buffer_head"]
    dentry = samples[1]
    assert dentry.active_objects == 40215
    assert dentry.object_size == 192
    assert dentry.active_memory == 40215 * 192


@pytest.mark.parametrize("text", [
    "",
    "not slabinfo\n",
    "slabinfo - version: 1.1\nkmalloc-64 1 1 64\n",
    "slabinfo - version: 2.1\nkmalloc-64 1 1\n",
    "slabinfo - version: 2.1\nkmalloc-64 x 1 64 1 1\n",
])
def test_parse_slabinfo_rejects_malformed_input(text):
    with pytest.raises(CollectionFailure):
        parse_slabinfo(text)


def test_proc_provider_reads_file(tmp_path):
    path = tmp_path / "slabinfo"
    path.write_text(SLABINFO_TEXT)
    provider = ProcSlabInfoProvider(str(path))
    assert isinstance(provider, SlabInfoProvider)
    assert len(provider.read()) == 3


def test_proc_provider_missing_file(tmp_path):
    provider = ProcSlabInfoProvider(str(tmp_path / "missing"))
    with pytest.raises(CollectionFailure) as excinfo:
        provider.read()
    assert excinfo.value.source == str(tmp_path / "missing")


class TestSortSamples:

    samples = [
        SlabSample("b", object_size=64, active_objects=10),
        SlabSample("a", object_size=192, active_objects=30),
        SlabSample("c", object_size=64, active_objects=30),
    ]

    def test_by_active_objects_is_default(self):
        assert [s.name for s in sort_samples(self.samples)] == ["a", "c", "b"]
        assert [s.name for s in sort_samples(self.samples, "a")] == ["a", "c", "b"]

    def test_by_name(self):
        assert [s.name for s in sort_samples(self.samples, "n")] == ["a", "b", "c"]

    def test_by_object_size(self):
        assert [s.name for s in sort_samples(self.samples, "s")] == ["a", "b", "c"]

    def test_unknown_key_falls_back_to_active_objects(self):
        assert [s.name for s in sort_samples(self.samples, "z")] == ["a", "c", "b"]
        assert [s.name for s in sort_samples(self.samples, "")] == ["a", "c", "b"]


def test_self_memory_tracker_reports_rss():
    tracker = SelfMemoryTracker()
    assert tracker.get_growth_mb() is None
    assert tracker.get_rss_mb() > 0
    tracker.set_baseline()
    assert tracker.get_growth_mb() >= 0.0
