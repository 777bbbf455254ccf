"""
tests/perf_bench.py
-------------------

Simple benchmark.

* builds 50k records (≈ 3 MB of JSON)
  - encode once
  - decode once (typed and dynamic)
* prints wall-clock time (ms)

pytest usage
------------
$ pytest tests/perf_bench.py -s
"""

import random
import time
from typing import List

import pytest

from jsonshape import decode_dynamic, decode_typed, encode

from sample_types import Contact


def _make_dataset(n=50_000):
    rand = random.Random(0)
    return [
        Contact(
            name=f"user{i}",
            email=None if rand.random() < 0.5 else f"user{i}@example.com",
            tags=[str(rand.randint(0, 9)) for _ in range(5)],
        )
        for i in range(n)
    ]


@pytest.mark.perf
def test_perf():
    data = _make_dataset()

    t0 = time.perf_counter()
    text = encode(data)
    enc_ms = (time.perf_counter() - t0) * 1000

    t0 = time.perf_counter()
    restored = decode_typed(List[Contact], text)
    dec_ms = (time.perf_counter() - t0) * 1000

    t0 = time.perf_counter()
    decode_dynamic('{"rows":' + text + "}")
    dyn_ms = (time.perf_counter() - t0) * 1000

    print(f"[perf] encode={enc_ms:7.1f} ms  decode={dec_ms:7.1f} ms  dynamic={dyn_ms:7.1f} ms")
    assert restored == data
