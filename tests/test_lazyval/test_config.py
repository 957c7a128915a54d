import pytest

from thds.lazyval import config

A = config.item("tests.lazyval.A", 1)
B = config.item("tests.lazyval.B", 2)
C = config.item("tests.lazyval.C", 3)
D = config.item("tests.lazyval.D", 4, parse=int)
SHORT = config.item("short_name", "s")


def test_recursive_config_load():
    config.set_global_defaults(
        {
            "tests.lazyval.A": 10,
            "tests": {"lazyval": {"C": 20}},
        }
    )
    assert A() == 10
    assert C() == 20
    assert B() == 2
    assert D() == 4


def test_set_global_defaults_error():
    with pytest.raises(KeyError, match="Config item tests.lazyval.E is not registered"):
        config.set_global_defaults({"tests.lazyval.E": 10})


def test_local_overrides_global():
    D.set_global("40")
    assert D() == 40
    with D.set_local("400"):
        assert D() == 400
    assert D() == 40


def test_unconfigured():
    unset = config.item("tests.lazyval.unset")
    try:
        with pytest.raises(config.UnconfiguredError, match="tests.lazyval.unset"):
            unset()
        with unset.set_local("now set"):
            assert unset() == "now set"
    finally:
        del config._REGISTRY[unset.name]


def test_names_collide():
    with pytest.raises(config.ConfigNameCollisionError):
        config.item("tests.lazyval.A", 5)


def test_short_names_are_prefixed_with_module_name():
    assert SHORT.name.endswith("test_config.short_name")
    assert config.config_by_name(SHORT.name) is SHORT


def test_env_var_read_at_creation(monkeypatch):
    monkeypatch.setenv("TESTS_LAZYVAL_FROM_ENV", "17")
    from_env = config.item("tests.lazyval.from-env", 0, parse=int)
    assert from_env() == 17

    monkeypatch.setenv("tests.lazyval.no_env", "17")
    no_env = config.item("tests.lazyval.no_env", 0, parse=int, allow_env_var=False)
    assert no_env() == 0


def test_show_all_config():
    shown = config.show_all_config()
    assert shown["thds.lazyval.failure.on_failure"] == "retry"
    assert shown["tests.lazyval.B"] == 2
