from timoni.completion import complete_prefix


def test_filters_by_prefix():
    names = ["redis", "podinfo", "redis-replica", "nginx"]
    assert complete_prefix(names, "red") == ["redis", "redis-replica"]


def test_empty_prefix_returns_all_in_order():
    names = ["b", "a", "c"]
    assert complete_prefix(names, "") == names


def test_no_match():
    assert complete_prefix(["default", "kube-system"], "apps") == []


def test_results_are_subset_with_prefix():
    names = ["app", "apps", "application", "web"]
    result = complete_prefix(iter(names), "app")
    assert all(name.startswith("app") for name in result)
    assert len(result) == 3
    assert set(result) <= set(names)