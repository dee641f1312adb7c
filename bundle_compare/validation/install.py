"""Configuration options that affect every comparison run"""

import logging

from bundle_compare.validation.validator import BundleCompareValidator

log = logging.getLogger(__name__)

config_schema = {
    "setup": {
        "type": "dict",
        "schema": {
            "loglvl": {
                "type": "string",
                "coerce": "upper",
                "allowed": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            },
            "sentry": {
                "type": "dict",
                "schema": {
                    "dsn": {"type": "string", "nullable": True},
                    "environment": {"type": "string", "nullable": True},
                },
            },
        },
    },
    # How asset names are normalized before base and current assets are matched
    "comparison": {
        "type": "dict",
        "schema": {
            "hash_pattern": {"type": "string", "check_with": "regex_pattern"},
            "hash_placeholder": {"type": "string"},
        },
    },
    # The markdown comment written for the pull request
    "comment": {
        "type": "dict",
        "schema": {
            "title": {"type": "string"},
            # rows shown in the top level changeset table
            "changeset_limit": {
                "type": "integer",
                "min": 1,
                "check_with": "not_boolean",
            },
            # rows shown in each table of the detailed breakdown
            "details_limit": {
                "type": "integer",
                "min": 1,
                "check_with": "not_boolean",
            },
        },
    },
}


def validate_install_configuration(inputted_dict):
    validator = BundleCompareValidator()
    is_valid = validator.validate(inputted_dict, config_schema)
    if not is_valid:
        log.warning(
            "Configuration considered invalid, using dict as it is",
            extra=dict(errors=validator.errors),
        )
    return validator.document
