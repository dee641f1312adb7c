import collections.abc
import json
import logging
import os
import re
from copy import deepcopy
from typing import Any, List, Tuple

from yaml import safe_load as yaml_load

from bundle_compare.bundle_analysis.utils import (
    DEFAULT_HASH_PATTERN,
    DEFAULT_HASH_PLACEHOLDER,
)
from bundle_compare.validation.install import validate_install_configuration


class MissingConfigException(Exception):
    pass


log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "bundle_compare.yml"
JSON_ENV_PREFIX = "JSONCONFIG___"

default_config = {
    "setup": {
        "loglvl": "INFO",
        "sentry": {"dsn": None, "environment": None},
    },
    "comparison": {
        "hash_pattern": DEFAULT_HASH_PATTERN,
        "hash_placeholder": DEFAULT_HASH_PLACEHOLDER,
    },
    "comment": {
        "title": "Vite Bundle Size Comparison",
        "changeset_limit": 20,
        "details_limit": 50,
    },
}


def update(d, u):
    d = deepcopy(d)
    for k, v in u.items():
        if isinstance(v, collections.abc.Mapping) and isinstance(
            d.get(k), collections.abc.Mapping
        ):
            d[k] = update(d.get(k, {}), v)
        else:
            d[k] = v
    return d


class ConfigHelper(object):
    def __init__(self):
        self._params = None

    # Load config values from environment variables, e.g. COMMENT__TITLE=Web
    def load_env_var(self):
        val = {}
        for env_var in os.environ:
            name = env_var.removeprefix(JSON_ENV_PREFIX)
            # unrelated envvars that happen to contain "__" are left alone
            if "__" not in name or name.split("__")[0].lower() not in default_config:
                continue
            multiple_level_vars, data = self._parse_path_and_value_from_envvar(
                env_var
            )
            current = val
            for c in multiple_level_vars[:-1]:
                current = current.setdefault(c.lower(), {})
            current[multiple_level_vars[-1].lower()] = data
        return val

    def _env_var_value_cast(self, data):
        if isinstance(data, str):
            if data in ("true", "True", "TRUE", "on", "On", "ON"):
                return True
            elif data in ("false", "False", "FALSE", "off", "Off", "OFF"):
                return False
            elif re.match(r"^-?\d+$", data):
                return int(data)
            elif re.match(r"^-?\d+\.\d+$", data):
                return float(data)

        return data

    def _parse_path_and_value_from_envvar(
        self, env_var_name: str
    ) -> Tuple[List[str], Any]:
        """
        Given an envvar, calculate both the data that needs to be put in the config and
            the location in the config where it needs to be set.

        For example:
            COMMENT__TITLE='Web' --> { 'comment': { 'title': 'Web' }}

        Envvars prefixed with `JSONCONFIG___` hold JSON-encoded data.

        Args:
            env_var_name (str): The envvar we want to load data from

        Returns:
            Tuple[List[str], Any]: Two elements:
                - The path where the data needs to be set
                - The actual data
        """
        should_load_from_json = env_var_name.startswith(JSON_ENV_PREFIX)
        path_to_use = env_var_name.removeprefix(JSON_ENV_PREFIX)
        data = os.getenv(env_var_name)
        data = data if not should_load_from_json else json.loads(data)
        data = self._env_var_value_cast(data)
        return (path_to_use.split("__"), data)

    @property
    def params(self):
        """
        Construct the config by combining default values, yaml config, and env vars.
        An env var overrides a yaml config value, which overrides the default values.
        """
        if self._params is None:
            content = self.yaml_content()
            env_vars = self.load_env_var()
            temp_result = update(default_config, content)
            unvalidated_final_result = update(temp_result, env_vars)
            final_result = validate_install_configuration(unvalidated_final_result)
            self.set_params(final_result)
        return self._params

    def set_params(self, val):
        self._params = val

    def get(self, *args):
        current_p = self.params
        for el in args:
            try:
                current_p = current_p[el]
            except (KeyError, TypeError):
                raise MissingConfigException(args)
        return current_p

    def load_yaml_file(self):
        yaml_path = os.getenv("BUNDLE_COMPARE_YML", DEFAULT_CONFIG_PATH)
        with open(yaml_path, "r") as c:
            return c.read()

    def yaml_content(self):
        try:
            return yaml_load(self.load_yaml_file()) or {}
        except FileNotFoundError:
            log.debug(
                "No configuration file found, using defaults",
                extra=dict(
                    path=os.getenv("BUNDLE_COMPARE_YML", DEFAULT_CONFIG_PATH)
                ),
            )
            return {}


config_class_instance = ConfigHelper()


def _get_config_instance():
    return config_class_instance


def get_config(*path, default=None):
    config = _get_config_instance()
    try:
        return config.get(*path)
    except MissingConfigException:
        return default
