import re

from cerberus import Validator


class BundleCompareValidator(Validator):
    def _normalize_coerce_upper(self, value):
        if isinstance(value, str):
            return value.upper()
        return value

    def _check_with_regex_pattern(self, field, value):
        try:
            re.compile(value)
        except re.error as exc:
            self._error(field, f"Invalid regular expression: {exc}")

    def _check_with_not_boolean(self, field, value):
        # cerberus' integer type lets bool through
        if isinstance(value, bool):
            self._error(field, "must be of integer type")
