"""Configuration items for the line formatter.

Every setting is a registered `ConfigItem`. A value can come from, in order of precedence:

- a thread-local override (`set_local`), mainly for tests,
- an environment variable, read at lookup time,
- the process-global store (`set_global`, `set_global_defaults`, `load_config_file`),
- the default given at registration.

Usage:

from thds.linefmt import config

LEVEL = config.item("thds.linefmt.log.level", "INFO")

LEVEL()  # 'INFO'
LEVEL.set_global("DEBUG")
with LEVEL.set_local("WARNING"):
    assert LEVEL() == "WARNING"

* as an environment variable:

export THDS_LINEFMT_LOG_LEVEL=DEBUG

* from a file:

config.load_config_file("logging.toml")
# [thds.linefmt]
# format = "{level}: {message}"
"""
import contextlib
import contextvars
import json
import typing as ty
from os import getenv
from pathlib import Path

import toml

_NOT_CONFIGURED = object()


class UnconfiguredError(ValueError):
    pass


class ConfigNameCollisionError(KeyError):
    pass


def _sanitize_env(env_var_name: str) -> str:
    return env_var_name.replace("-", "_").replace(".", "_")


def _getenv(env_var_name: str) -> ty.Optional[str]:
    """Accepts the config name as-is, or with dots and dashes turned into underscores,
    or that same thing in all caps. Empty values count as unset.
    """
    return (
        getenv(env_var_name)
        or getenv(_sanitize_env(env_var_name))
        or getenv(_sanitize_env(env_var_name).upper())
    )


def env_var_name(name: str) -> str:
    """The conventional (all caps) environment variable for a config name."""
    return _sanitize_env(name).upper()


T = ty.TypeVar("T")


class ConfigItem(ty.Generic[T]):
    """Should only ever be constructed at a module level."""

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
        _REGISTRY[name] = self
        self.name = name
        self.default = default
        self.parse = parse
        self.allow_env_var = allow_env_var
        self.global_value: ty.Any = _NOT_CONFIGURED
        self._local: contextvars.ContextVar[ty.Any] = contextvars.ContextVar(
            "config " + name, default=_NOT_CONFIGURED
        )

    def set_global(self, value: T):
        """Global to the current process. An environment variable still wins."""
        self.global_value = self.parse(value)

    def clear_global(self):
        self.global_value = _NOT_CONFIGURED

    @contextlib.contextmanager
    def set_local(self, value: T) -> ty.Iterator[T]:
        """Local to the current thread (or async task), for the duration of the with block."""
        parsed = self.parse(value)
        token = self._local.set(parsed)
        try:
            yield parsed
        finally:
            self._local.reset(token)

    def lookup(self) -> ty.Optional[T]:
        """The configured value, or None if nothing but the default applies."""
        local = self._local.get()
        if local is not _NOT_CONFIGURED:
            return local
        if self.allow_env_var:
            from_env = _getenv(self.name)
            if from_env:
                return self.parse(from_env)
        if self.global_value is not _NOT_CONFIGURED:
            return self.global_value
        return None

    def __call__(self) -> T:
        value = self.lookup()
        if value is not None:
            return value
        if self.default is _NOT_CONFIGURED:
            raise UnconfiguredError(f"Config item '{self.name}' has not been configured!")
        return self.default

    def __repr__(self) -> str:
        return f"ConfigItem({self.name!r})"


def item(
    name: str,
    default: T = ty.cast(T, _NOT_CONFIGURED),
    *,
    parse: ty.Callable[[ty.Any], T] = lambda x: x,
    allow_env_var: bool = True,
) -> ConfigItem[T]:
    return ConfigItem(name, default, parse=parse, allow_env_var=allow_env_var)


class ConfigItemP(ty.Protocol[T]):
    def __call__(
        self,
        name: str,
        default: T = ty.cast(T, _NOT_CONFIGURED),
        parse: ty.Callable[[ty.Any], T] = lambda x: x,
        allow_env_var: bool = True,
    ) -> ConfigItem[T]:
        ...


def in_module(module_name: str) -> ConfigItemP:
    """Prefixes every item name with the module name, e.g. `in_module(__name__)("bar")`."""

    def _module(name: str, *args, **kwargs) -> ConfigItem:
        return ConfigItem(f"{module_name}.{name}", *args, **kwargs)

    return ty.cast(ConfigItemP, _module)


_REGISTRY: ty.Dict[str, ConfigItem] = dict()


def config_by_name(name: str) -> ConfigItem:
    """This is a dynamic interface - in general, prefer accessing the ConfigItem object directly."""
    return _REGISTRY[name]


def set_global_defaults(config: ty.Mapping[str, ty.Any]):
    """Sets many global values at once. Names may be dotted, or nested as dicts
    (which is what you get from most TOML files).
    """
    for name, value in config.items():
        if isinstance(value, dict):
            set_global_defaults({f"{name}.{key}": val for key, val in value.items()})
            continue
        try:
            _REGISTRY[name].set_global(value)
        except KeyError:
            # the owning module may simply not have been imported yet.
            import importlib

            maybe_module_name = ".".join(name.split(".")[:-1])
            try:
                importlib.import_module(maybe_module_name)
            except ModuleNotFoundError:
                continue
            try:
                _REGISTRY[name].set_global(value)
            except KeyError as kerr:
                raise KeyError(
                    f"Config item {name} is not registered"
                    f" and no module with the name {maybe_module_name} was importable."
                    " Please double-check your configuration."
                ) from kerr


def load_config_file(path: ty.Union[str, Path]) -> ty.Dict[str, ty.Any]:
    """Reads a .toml or .json file into the global store. Returns what was read."""
    path = Path(path)
    if path.suffix == ".toml":
        loaded = toml.load(str(path))
    elif path.suffix == ".json":
        with open(path) as f:
            loaded = json.load(f)
    else:
        raise ValueError(f"Unsupported config file type '{path.suffix}' for {path}")
    set_global_defaults(loaded)
    return loaded


def show_all_config() -> ty.Dict[str, ty.Any]:
    """Every registered item that currently has a value."""
    return {
        k: v()
        for k, v in _REGISTRY.items()
        if v.default is not _NOT_CONFIGURED or v.lookup() is not None
    }
