"""Configuration loading, writing, and project initialization.

Reads ``orders.toml`` using stdlib ``tomllib`` and serializes the effective
configuration using ``tomli_w``.  Depends only on ``models.py`` and
``descriptors.py``.
"""

from __future__ import annotations

import sys
from dataclasses import asdict
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

import tomli_w

from order_history.descriptors import LAZADA_DESCRIPTOR, OrderDescriptor, descriptor_from_mapping
from order_history.models import AppConfig, BrowserConfig, PaginationConfig, SiteConfig

CONFIG_FILENAME = "orders.toml"


class ConfigError(ValueError):
    """A configuration value is present but invalid."""


# ---------------------------------------------------------------------------
# Default file content
# ---------------------------------------------------------------------------

_DEFAULT_CONFIG_TOML = """\
# Order History Extractor configuration

[general]
output_file = "output/Orders.xlsx"
currency_label = "PHP"

[site]
home_url = "https://lazada.com.ph/"
orders_url = "https://my.lazada.com.ph/customer/order/index/"

[browser]
headless = false        # The manual login needs a visible window
slow_mo_ms = 0

[pagination]
settle_delay_ms = 2000          # Fixed wait after clicking "next" (fallback)
ready_selector = ""             # Wait for this selector instead, if set
wait_for_network_idle = false   # Or wait for the network to go idle
ready_timeout_ms = 10000        # Upper bound for either readiness wait
strict = false                  # Fail if "next" disappears before the last page

# Selector overrides.  Leave commented out to use the built-in Lazada
# selectors.  A field may also be a table: { selector = "...", rule = "currency" }
[selectors]
# order = '.order-list [tag="order-component"]'
# item = ".order-item"
# shop_name = ".shop-left-info-name"
# delivery_status = ".shop-right-status"
# item_name = ".text.title.item-title"
# price = ".item-price"
# quantity = ".item-quantity .text.desc.info.multiply + .text"
# status = ".item-status.item-capsule"
# last_page = ".next-pagination-list button:last-child"
# next_page = ".next-pagination-item.next"
"""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(root: Path, filename: str = CONFIG_FILENAME) -> AppConfig:
    """Load ``orders.toml`` from *root* and return an :class:`AppConfig`.

    Missing sections and keys take their defaults.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigError: If a value has the wrong type or range, or a selector
            override names an unknown field or parse rule.
    """
    data = _read_toml(Path(root) / filename)

    general = data.get("general", {})
    site = data.get("site", {})
    browser = data.get("browser", {})
    pagination = data.get("pagination", {})
    selectors = data.get("selectors", {})

    defaults = AppConfig()
    config = AppConfig(
        output_file=str(general.get("output_file", defaults.output_file)),
        currency_label=str(general.get("currency_label", defaults.currency_label)),
        site=SiteConfig(
            home_url=str(site.get("home_url", defaults.site.home_url)),
            orders_url=str(site.get("orders_url", defaults.site.orders_url)),
        ),
        browser=BrowserConfig(
            headless=_bool(browser, "headless", defaults.browser.headless),
            slow_mo_ms=_non_negative_int(browser, "slow_mo_ms", defaults.browser.slow_mo_ms),
        ),
        pagination=PaginationConfig(
            settle_delay_ms=_non_negative_int(
                pagination, "settle_delay_ms", defaults.pagination.settle_delay_ms
            ),
            ready_selector=str(pagination.get("ready_selector", "")),
            wait_for_network_idle=_bool(pagination, "wait_for_network_idle", False),
            ready_timeout_ms=_positive_int(
                pagination, "ready_timeout_ms", defaults.pagination.ready_timeout_ms
            ),
            strict=_bool(pagination, "strict", False),
        ),
        selectors=dict(selectors),
    )

    # Validate selector overrides eagerly so typos fail before the browser opens.
    build_descriptor(config)
    return config


def build_descriptor(config: AppConfig) -> OrderDescriptor:
    """Return the extraction descriptor for *config*.

    Raises:
        ConfigError: If a selector override is invalid.
    """
    try:
        return descriptor_from_mapping(config.selectors, LAZADA_DESCRIPTOR)
    except KeyError as exc:
        raise ConfigError(exc.args[0]) from exc


def dump_config(config: AppConfig) -> str:
    """Serialize *config* (including defaults) as TOML text."""
    return tomli_w.dumps(
        {
            "general": {
                "output_file": config.output_file,
                "currency_label": config.currency_label,
            },
            "site": asdict(config.site),
            "browser": asdict(config.browser),
            "pagination": asdict(config.pagination),
            "selectors": dict(config.selectors),
        }
    )


def initialize(target_dir: Path) -> Path:
    """Create the default ``orders.toml`` and the output directory.

    Idempotent: an existing config file is **not** overwritten.

    Returns:
        The path to the config file.
    """
    target_dir = Path(target_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / "output").mkdir(exist_ok=True)

    config_path = target_dir / CONFIG_FILENAME
    if not config_path.exists():
        config_path.write_text(_DEFAULT_CONFIG_TOML, encoding="utf-8")
    return config_path


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _read_toml(path: Path) -> dict:
    """Read and parse a TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def _bool(section: dict, key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false, got {value!r}")
    return value


def _non_negative_int(section: dict, key: str, default: int) -> int:
    value = section.get(key, default)
    # bool is a subclass of int; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"{key} must be a non-negative integer, got {value!r}")
    return value


def _positive_int(section: dict, key: str, default: int) -> int:
    value = section.get(key, default)
    # Playwright treats a zero timeout as "wait forever".
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{key} must be a positive integer, got {value!r}")
    return value
