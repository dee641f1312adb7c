import random
from collections import Counter

from bundle_compare.bundle_analysis import (
    AssetChange,
    AssetNameNormalizer,
    AssetRecord,
    BundleSizeComparison,
    ComparisonResult,
    compare,
    load_snapshot,
)
from bundle_compare.helpers.size import format_percent


def test_compare_grown_hashed_asset():
    base = [AssetRecord(name="app-abc12345.js", parsed_size=1000, gzip_size=400)]
    current = [AssetRecord(name="app-xyz98765.js", parsed_size=1200, gzip_size=450)]

    result = compare(base, current)

    assert result == ComparisonResult(
        bigger=(
            AssetChange(
                key="app-[hash].js",
                change_type=AssetChange.ChangeType.BIGGER,
                parsed_delta=200,
                gzip_delta=50,
                previous=base[0],
                next=current[0],
            ),
        ),
    )
    change = result.bigger[0]
    assert change.percentage_delta == 20.0
    assert format_percent(change.previous.parsed_size, change.next.parsed_size) == (
        "+20.00%"
    )


def test_compare_added_asset():
    current = [AssetRecord(name="new.js", parsed_size=500, gzip_size=200)]

    result = compare([], current)

    assert result.bigger == ()
    assert result.smaller == ()
    assert result.removed == ()
    assert result.added == (
        AssetChange(
            key="new.js",
            change_type=AssetChange.ChangeType.ADDED,
            parsed_delta=500,
            gzip_delta=200,
            next=current[0],
        ),
    )
    assert result.added[0].size_base == 0
    assert result.added[0].percentage_delta is None
    assert format_percent(0, 500) == "new"


def test_compare_removed_asset():
    base = [AssetRecord(name="old.js", parsed_size=500, gzip_size=200)]

    result = compare(base, [])

    assert result.added == ()
    assert result.removed == (
        AssetChange(
            key="old.js",
            change_type=AssetChange.ChangeType.REMOVED,
            parsed_delta=-500,
            gzip_delta=-200,
            previous=base[0],
        ),
    )
    assert result.removed[0].size_head == 0
    assert result.removed[0].percentage_delta == -100.0


def test_percentage_delta_rounds_ties_like_the_report():
    base = [AssetRecord(name="app-abc12345.js", parsed_size=800, gzip_size=300)]
    current = [AssetRecord(name="app-xyz98765.js", parsed_size=801, gzip_size=300)]

    change = compare(base, current).bigger[0]

    assert change.percentage_delta == 0.13
    assert format_percent(800, 801) == "+0.13%"
    assert f"+{change.percentage_delta:.2f}%" == format_percent(800, 801)


def test_compare_unchanged_asset():
    records = [AssetRecord(name="same.js", parsed_size=300, gzip_size=100)]

    result = compare(records, list(records))

    assert result == ComparisonResult()
    assert result.has_changes is False
    assert result.changes == ()


def test_compare_same_parsed_size_different_gzip_is_dropped():
    base = [AssetRecord(name="same-abc12345.js", parsed_size=300, gzip_size=100)]
    current = [AssetRecord(name="same-def67890.js", parsed_size=300, gzip_size=150)]

    assert compare(base, current) == ComparisonResult()


def test_compare_empty_snapshots():
    assert compare([], []) == ComparisonResult()


def test_compare_zero_byte_base_asset():
    base = [AssetRecord(name="empty.js", parsed_size=0, gzip_size=0)]
    current = [AssetRecord(name="empty.js", parsed_size=10, gzip_size=20)]

    result = compare(base, current)

    assert len(result.bigger) == 1
    change = result.bigger[0]
    # base is exposed so the 0 byte case can be told apart
    assert change.previous.parsed_size == 0
    assert change.percentage_delta is None
    assert format_percent(change.previous.parsed_size, change.next.parsed_size) == "new"


def test_compare_pairs_assets_by_size_rank():
    base = [
        AssetRecord(name="a-11111111.js", parsed_size=100, gzip_size=50),
        AssetRecord(name="a-22222222.js", parsed_size=300, gzip_size=90),
    ]
    current = [
        AssetRecord(name="a-33333333.js", parsed_size=310, gzip_size=95),
        AssetRecord(name="a-44444444.js", parsed_size=90, gzip_size=45),
        AssetRecord(name="a-55555555.js", parsed_size=50, gzip_size=20),
    ]

    result = compare(base, current)

    # sorted base [100, 300] pairs with sorted current [50, 90], 310 is left over
    assert [(c.previous.name, c.next.name, c.parsed_delta) for c in result.smaller] == [
        ("a-22222222.js", "a-44444444.js", -210),
        ("a-11111111.js", "a-55555555.js", -50),
    ]
    assert result.bigger == ()
    assert [(c.key, c.next.name) for c in result.added] == [
        ("a-[hash].js", "a-33333333.js")
    ]
    assert result.removed == ()


def test_compare_more_base_assets_than_current():
    base = [
        AssetRecord(name="chunk-aaaaaaaa.js", parsed_size=700),
        AssetRecord(name="chunk-bbbbbbbb.js", parsed_size=200),
        AssetRecord(name="chunk-cccccccc.js", parsed_size=500),
    ]
    current = [AssetRecord(name="chunk-dddddddd.js", parsed_size=250)]

    result = compare(base, current)

    assert [c.parsed_delta for c in result.bigger] == [50]
    assert result.bigger[0].previous.name == "chunk-bbbbbbbb.js"
    assert [c.previous.name for c in result.removed] == [
        "chunk-aaaaaaaa.js",
        "chunk-cccccccc.js",
    ]
    assert [c.parsed_delta for c in result.removed] == [-700, -500]


def test_compare_sorting_of_buckets():
    base = [
        AssetRecord(name="x.js", parsed_size=100),
        AssetRecord(name="y.js", parsed_size=100),
        AssetRecord(name="z.js", parsed_size=100),
        AssetRecord(name="w.js", parsed_size=500),
        AssetRecord(name="gone-small.js", parsed_size=10),
        AssetRecord(name="gone-big.js", parsed_size=1000),
    ]
    current = [
        AssetRecord(name="x.js", parsed_size=150),
        AssetRecord(name="y.js", parsed_size=400),
        AssetRecord(name="z.js", parsed_size=90),
        AssetRecord(name="w.js", parsed_size=200),
        AssetRecord(name="new-small.js", parsed_size=5),
        AssetRecord(name="new-big.js", parsed_size=5000),
    ]

    result = compare(base, current)

    assert [(c.key, c.parsed_delta) for c in result.bigger] == [
        ("y.js", 300),
        ("x.js", 50),
    ]
    assert [(c.key, c.parsed_delta) for c in result.smaller] == [
        ("w.js", -300),
        ("z.js", -10),
    ]
    assert [c.key for c in result.added] == ["new-big.js", "new-small.js"]
    assert [c.key for c in result.removed] == ["gone-big.js", "gone-small.js"]
    assert [c.key for c in result.changes] == [
        "new-big.js",
        "new-small.js",
        "gone-big.js",
        "gone-small.js",
        "y.js",
        "x.js",
        "w.js",
        "z.js",
    ]


def test_compare_ties_keep_snapshot_order():
    base = [
        AssetRecord(name="c-aaaaaaaa.js", parsed_size=100, gzip_size=10),
        AssetRecord(name="c-bbbbbbbb.js", parsed_size=100, gzip_size=20),
    ]
    current = [
        AssetRecord(name="c-cccccccc.js", parsed_size=150, gzip_size=30),
        AssetRecord(name="c-dddddddd.js", parsed_size=150, gzip_size=5),
    ]

    result = compare(base, current)

    assert [
        (c.previous.name, c.next.name, c.parsed_delta, c.gzip_delta)
        for c in result.bigger
    ] == [
        ("c-aaaaaaaa.js", "c-cccccccc.js", 50, 20),
        ("c-bbbbbbbb.js", "c-dddddddd.js", 50, -15),
    ]


def test_compare_does_not_mutate_inputs():
    base = [
        AssetRecord(name="a-22222222.js", parsed_size=300),
        AssetRecord(name="a-11111111.js", parsed_size=100),
    ]
    current = [AssetRecord(name="a-33333333.js", parsed_size=50)]
    base_copy, current_copy = list(base), list(current)

    compare(base, current)

    assert base == base_copy
    assert current == current_copy


def test_compare_with_custom_normalizer():
    base = [AssetRecord(name="main.3b1f0c9e2a7d4f6b8c01.js", parsed_size=100)]
    current = [AssetRecord(name="main.aa1f0c9e2a7d4f6b8c99.js", parsed_size=120)]
    normalizer = AssetNameNormalizer(
        pattern=r"\.[0-9a-f]{20}(?=\.[^.]+$)", placeholder=".[contenthash]"
    )

    # default normalizer does not understand webpack style hashes
    default_result = compare(base, current)
    assert len(default_result.added) == 1
    assert len(default_result.removed) == 1

    result = compare(base, current, normalizer=normalizer)
    assert [(c.key, c.parsed_delta) for c in result.bigger] == [
        ("main.[contenthash].js", 20)
    ]


def test_bundle_size_comparison_asset_groups():
    comparison = BundleSizeComparison(
        base_records=[
            AssetRecord(name="b-aaaaaaaa.js", parsed_size=1),
            AssetRecord(name="a.js", parsed_size=1),
        ],
        current_records=[
            AssetRecord(name="c.js", parsed_size=1),
            AssetRecord(name="b-bbbbbbbb.js", parsed_size=1),
        ],
    )
    groups = comparison.asset_groups
    assert list(groups) == ["b-[hash].js", "a.js", "c.js"]
    assert [r.name for r in groups["b-[hash].js"].base] == ["b-aaaaaaaa.js"]
    assert [r.name for r in groups["b-[hash].js"].current] == ["b-bbbbbbbb.js"]
    assert groups["a.js"].current == []
    assert groups["c.js"].base == []


def test_compare_sample_snapshots(base_stats_path, current_stats_path):
    base = load_snapshot(base_stats_path)
    current = load_snapshot(current_stats_path)

    result = compare(base, current)

    assert [(c.key, c.parsed_delta, c.gzip_delta) for c in result.bigger] == [
        ("assets/index-[hash].js", 6790, 1979)
    ]
    assert [(c.key, c.parsed_delta, c.gzip_delta) for c in result.smaller] == [
        ("assets/index-[hash].css", -1234, -202)
    ]
    assert [(c.next.name, c.parsed_delta) for c in result.added] == [
        ("assets/Chart-Kk2LmN0p.js", 52311)
    ]
    assert [(c.previous.name, c.parsed_delta) for c in result.removed] == [
        ("assets/Settings-Hq81ZzYp.js", -9120)
    ]


def _random_snapshot(rng, prefix, count):
    families = ["app", "vendor", "index", "chunk", "worker"]
    return [
        AssetRecord(
            name=f"{rng.choice(families)}-{prefix}{i:07d}.js",
            parsed_size=rng.choice([0, 100, 200, rng.randint(0, 5000)]),
            gzip_size=rng.randint(0, 2000),
        )
        for i in range(count)
    ]


def test_compare_partitions_every_record():
    rng = random.Random(2024)
    for _ in range(30):
        base = _random_snapshot(rng, "b", rng.randint(0, 15))
        current = _random_snapshot(rng, "c", rng.randint(0, 15))
        comparison = BundleSizeComparison(base, current)
        result = comparison.comparison_result()

        dropped = [
            (previous, next)
            for group in comparison.asset_groups.values()
            for previous, next in comparison._match_assets(group.base, group.current)
            if previous is not None
            and next is not None
            and previous.parsed_size == next.parsed_size
        ]

        seen_current = Counter(
            [id(c.next) for c in result.bigger + result.smaller + result.added]
            + [id(next) for _, next in dropped]
        )
        seen_base = Counter(
            [id(c.previous) for c in result.bigger + result.smaller + result.removed]
            + [id(previous) for previous, _ in dropped]
        )
        assert seen_current == Counter(id(record) for record in current)
        assert seen_base == Counter(id(record) for record in base)


def test_compare_result_ordering_properties():
    rng = random.Random(7)
    for _ in range(30):
        result = compare(
            _random_snapshot(rng, "b", rng.randint(0, 20)),
            _random_snapshot(rng, "c", rng.randint(0, 20)),
        )
        bigger = [c.parsed_delta for c in result.bigger]
        smaller = [c.parsed_delta for c in result.smaller]
        added = [c.next.parsed_size for c in result.added]
        removed = [c.previous.parsed_size for c in result.removed]
        assert bigger == sorted(bigger, reverse=True)
        assert all(delta > 0 for delta in bigger)
        assert smaller == sorted(smaller)
        assert all(delta < 0 for delta in smaller)
        assert added == sorted(added, reverse=True)
        assert removed == sorted(removed, reverse=True)
