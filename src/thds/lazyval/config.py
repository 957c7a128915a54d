"""Registered configuration items for thds.lazyval.

Every item is a callable that returns its current value. Values come from, in order:

- a local override for the current thread, set with `item.set_local(value)` in a `with` block;
- the process-global value, set with `item.set_global(value)`;
- an environment variable present when the item was created;
- the default.

```
from thds.lazyval import config

ON_FAILURE = config.item("on_failure", "retry")  # registered as "<this module>.on_failure"

ON_FAILURE.set_global("poison")
with ON_FAILURE.set_local("retry"):
    assert ON_FAILURE() == "retry"
assert ON_FAILURE() == "poison"
```

The env var for `thds.lazyval.failure.on_failure` may be spelled exactly that way, or as
`thds_lazyval_failure_on_failure`, or as `THDS_LAZYVAL_FAILURE_ON_FAILURE`.
"""
import sys
import typing as ty
from os import getenv

from .stack_context import StackContext

_NOT_CONFIGURED = object()


class UnconfiguredError(ValueError):
    pass


class ConfigNameCollisionError(KeyError):
    pass


def _sanitize_env(env_var_name: str) -> str:
    return env_var_name.replace("-", "_").replace(".", "_")


def _getenv(name: str) -> ty.Optional[str]:
    return getenv(name) or getenv(_sanitize_env(name)) or getenv(_sanitize_env(name).upper())


T = ty.TypeVar("T")


class ConfigItem(ty.Generic[T]):
    """Should only ever be constructed at module level."""

    def __init__(
        self,
        name: str,
        default: T = ty.cast(T, _NOT_CONFIGURED),
        *,
        parse: ty.Callable[[ty.Any], T] = lambda x: x,
        allow_env_var: bool = True,
    ):
        if name in _REGISTRY:
            raise ConfigNameCollisionError(f"Config item {name} has already been registered!")
        self.name = name
        self.parse = parse
        env_value = _getenv(name) if allow_env_var else None
        # the env var only counts at creation time; use set_global after that.
        self.global_value = parse(env_value) if env_value else default
        self._local: StackContext[T] = StackContext("config " + name, ty.cast(T, _NOT_CONFIGURED))
        _REGISTRY[name] = self

    def set_global(self, value: T) -> None:
        """Global to the current process. Not transferred to spawned processes."""
        self.global_value = self.parse(value)

    def set_local(self, value: T) -> ty.ContextManager[T]:
        """Local to the current thread, for the duration of the `with` block."""
        return self._local.set(self.parse(value))

    def __call__(self) -> T:
        local = self._local()
        if local is not _NOT_CONFIGURED:
            return local
        if self.global_value is _NOT_CONFIGURED:
            raise UnconfiguredError(f"Config item '{self.name}' has not been configured!")
        return self.global_value

    def __repr__(self) -> str:
        return f"ConfigItem({self.name!r})"


_REGISTRY: ty.Dict[str, ConfigItem] = dict()


def item(
    name: str,
    default: T = ty.cast(T, _NOT_CONFIGURED),
    *,
    parse: ty.Callable[[ty.Any], T] = lambda x: x,
    allow_env_var: bool = True,
) -> ConfigItem[T]:
    """Register a config item. A name with no dot in it is prefixed with the
    calling module's name, which keeps names discoverable and collision-free.
    """
    if "." not in name:
        name = f"{sys._getframe(1).f_globals['__name__']}.{name}"
    return ConfigItem(name, default, parse=parse, allow_env_var=allow_env_var)


def config_by_name(name: str) -> ConfigItem:
    return _REGISTRY[name]


def set_global_defaults(config: ty.Mapping[str, ty.Any]) -> None:
    """Set many items at once, e.g. from a parsed TOML or JSON file.

    Nested dictionaries are flattened into dotted names.
    """
    for name, value in config.items():
        if isinstance(value, dict):
            set_global_defaults({f"{name}.{key}": val for key, val in value.items()})
            continue
        try:
            config_item = _REGISTRY[name]
        except KeyError as kerr:
            raise KeyError(
                f"Config item {name} is not registered. Please double-check your configuration."
            ) from kerr
        config_item.set_global(value)


def show_all_config() -> ty.Dict[str, ty.Any]:
    return {k: v() for k, v in _REGISTRY.items()}
