"""Shape of a single entry in a Vite stats JSON array"""

from bundle_compare.validation.validator import BundleCompareValidator

# Stats files carry plenty of other keys (isEntry, imports, ...) that are not needed here
asset_entry_schema = {
    "filename": {"type": "string", "nullable": True},
    "label": {"type": "string", "nullable": True},
    "parsedSize": {
        "type": "integer",
        "nullable": True,
        "min": 0,
        "check_with": "not_boolean",
    },
    "gzipSize": {
        "type": "integer",
        "nullable": True,
        "min": 0,
        "check_with": "not_boolean",
    },
}


def make_asset_entry_validator() -> BundleCompareValidator:
    return BundleCompareValidator(asset_entry_schema, allow_unknown=True)
