"""
Unit tests for the result caches.
"""
import pytest

from primer_thermo.caching import DictCache, LRUCache, ResultCache, make_cache_key
from primer_thermo.errors import InvalidConfigurationError


def test_dict_cache_basic_operations():
    """
    Values round-trip; misses return None; `clear` empties the store.
    """
    cache = DictCache()
    cache.put(("tm", "ACGT"), 42.0)

    assert cache.get(("tm", "ACGT")) == 42.0
    assert cache.get(("tm", "TTTT")) is None
    assert ("tm", "ACGT") in cache
    assert len(cache) == 1

    cache.clear()
    assert len(cache) == 0


def test_lru_cache_evicts_least_recently_used():
    """
    Reading an entry protects it from the next eviction.
    """
    cache = LRUCache(maxsize=2)
    cache.put(("a",), 1)
    cache.put(("b",), 2)
    # Touch "a" so "b" becomes the eviction candidate.
    assert cache.get(("a",)) == 1
    cache.put(("c",), 3)

    assert ("a",) in cache
    assert ("b",) not in cache
    assert ("c",) in cache
    assert len(cache) == 2
    assert cache.maxsize == 2


@pytest.mark.parametrize("maxsize", [0, -1, 2.5, "10"])
def test_lru_cache_rejects_bad_sizes(maxsize):
    """
    The bound must be a positive integer.
    """
    with pytest.raises(InvalidConfigurationError):
        LRUCache(maxsize=maxsize)


def test_caches_satisfy_the_protocol():
    """
    Both implementations can be passed wherever a `ResultCache` is expected.
    """
    assert isinstance(DictCache(), ResultCache)
    assert isinstance(LRUCache(), ResultCache)


def test_make_cache_key_embeds_the_parameter_identity():
    """
    Keys differ between parameter sets for the same inputs.
    """
    revised = make_cache_key("tm", "santalucia2004@2004.1", "ACGT", 50.0)
    legacy = make_cache_key("tm", "santalucia1998@1998.1", "ACGT", 50.0)

    assert revised == ("tm", "ACGT", 50.0, "santalucia2004@2004.1")
    assert revised != legacy
